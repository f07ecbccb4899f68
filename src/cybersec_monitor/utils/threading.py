"""Threading utilities for background tasks."""

import threading
from typing import Callable


def start_background_task(
    func: Callable[[], None], name: str | None = None
) -> threading.Thread:
    """Start a function in a background daemon thread.

    Args:
        func: Function to run (no arguments)
        name: Optional thread name (shows up in logs and debuggers)

    Returns:
        The started thread
    """
    thread = threading.Thread(target=func, name=name, daemon=True)
    thread.start()
    return thread
