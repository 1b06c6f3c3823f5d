#!/usr/bin/env python3
"""Basic usage example"""

import sys
from datetime import timedelta

from notifier_module import NotifierBuilder, Shim, ShimQueue


def main():
    # Calls made before the notifier is ready are recorded on a shim
    shim_queue = ShimQueue()
    shim = Shim(shim_queue)
    shim.info("Application booting")

    # Create notifier with builder pattern
    notifier = (NotifierBuilder()
        .with_access_token("POST_CLIENT_ITEM_TOKEN")
        .with_environment("development")
        .with_items_per_minute(60)
        .with_flush_interval(timedelta(seconds=1))
        .with_autostart(True)
        .build())

    # Replay buffered calls; the shim now forwards to the notifier
    notifier.process_shim_queue(shim_queue)

    notifier.info("Application started")
    checkout = notifier.scope({"component": "checkout"})
    try:
        {}["cart"]
    except KeyError as e:
        checkout.error("Cart lookup failed", e, {"user_id": 42})

    notifier.warning(
        "Login retried",
        {"next": "/account?password=hunter2"},
        lambda err, resp=None: print("delivered" if err is None else f"failed: {err}"),
    )

    sys.excepthook = notifier.handle_exception

    # Send what is queued and shut down
    notifier.runtime.shutdown()


if __name__ == "__main__":
    main()
