"""Worker-count heuristics for the parallel gather phases."""

import os
import sys
from typing import Any, Dict, Optional


def is_free_threading_enabled() -> bool:
    """Detect if Python is running with free-threading enabled.

    Returns:
        True on Python 3.13+ with the GIL disabled, False otherwise
    """
    # sys._is_gil_enabled() exists from Python 3.13 and returns False when the GIL is off
    is_gil_enabled = getattr(sys, "_is_gil_enabled", None)
    return is_gil_enabled is not None and not is_gil_enabled()


def get_python_threading_mode() -> str:
    """Describe the threading mode: "free-threading", "GIL-enabled" or "GIL-enabled (Python < 3.13)"."""
    if not hasattr(sys, "_is_gil_enabled"):
        return "GIL-enabled (Python < 3.13)"
    return "free-threading" if is_free_threading_enabled() else "GIL-enabled"


def get_optimal_worker_count(user_specified: Optional[int] = None) -> int:
    """Calculate the worker count for I/O-bound git subprocess fan-out.

    Args:
        user_specified: User-specified worker count, if provided

    Returns:
        Number of workers for parallel processing
    """
    if user_specified is not None and user_specified > 0:
        return user_specified

    cpu_count = os.cpu_count() or 1

    if is_free_threading_enabled():
        # Free-threading: use more workers, capped to avoid excessive overhead
        return min(64, cpu_count * 2)

    # CPU_count + 4 is a good heuristic for I/O-bound work
    return min(32, cpu_count + 4)


def get_threading_info() -> Dict[str, Any]:
    """Threading configuration summary, logged in debug mode."""
    return {
        "mode": get_python_threading_mode(),
        "free_threading": is_free_threading_enabled(),
        "cpu_count": os.cpu_count() or 1,
        "optimal_workers": get_optimal_worker_count(),
        "python_version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
    }
