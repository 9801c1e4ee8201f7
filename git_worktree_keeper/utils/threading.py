"""Threading utilities for sizing worker pools."""

import os
import sys
from typing import Dict, Any, Optional


def is_free_threading_enabled() -> bool:
    """Detect if Python is running with free-threading enabled.

    Returns:
        True if running on Python 3.13+ with GIL disabled (free-threading mode)
        False if running with GIL enabled or Python < 3.13
    """
    return hasattr(sys, "_is_gil_enabled") and not sys._is_gil_enabled()


def get_python_threading_mode() -> str:
    """Get a description of the current threading mode.

    Returns:
        String describing threading mode: "free-threading", "GIL-enabled", or "GIL-enabled (Python < 3.13)"
    """
    if not hasattr(sys, "_is_gil_enabled"):
        return "GIL-enabled (Python < 3.13)"
    return "GIL-enabled" if sys._is_gil_enabled() else "free-threading"


def get_optimal_worker_count(user_specified: Optional[int] = None, limit: Optional[int] = None) -> int:
    """Calculate worker count for I/O-bound git invocations.

    Args:
        user_specified: User-specified worker count, if provided
        limit: Upper bound, e.g. the number of queued tasks

    Returns:
        Number of workers to use (at least 1)
    """
    if user_specified is not None and user_specified > 0:
        workers = user_specified
    else:
        cpu_count = os.cpu_count() or 1
        if is_free_threading_enabled():
            workers = min(64, cpu_count * 2)
        else:
            # Each worker mostly waits on a git subprocess
            workers = min(32, cpu_count + 4)

    if limit is not None:
        workers = min(workers, limit)
    return max(1, workers)


def get_threading_info() -> Dict[str, Any]:
    """Get comprehensive information about Python threading configuration.

    Returns:
        Dictionary containing threading mode, worker count, and other details
    """
    return {
        "mode": get_python_threading_mode(),
        "free_threading": is_free_threading_enabled(),
        "cpu_count": os.cpu_count() or 1,
        "optimal_workers": get_optimal_worker_count(),
        "python_version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
    }
