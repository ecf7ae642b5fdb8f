"""
Utility tools for solar axion flux calculations.

This module provides helper functions and decorators for:
- Performance monitoring (timing decorators)
"""

from functools import wraps
from time import time


def timer(func):
    """Decorator to measure and print function execution time.

    Flux tables over many energies take from seconds to hours depending on
    the tolerances, so the batch workflows report their run time.

    Parameters
    ----------
    func : callable
        The function to be timed

    Returns
    -------
    callable
        Wrapped function that prints execution time
    """
    @wraps(func)
    def wrapper_timer(*args, **kwargs):
        start_time = time()
        value = func(*args, **kwargs)
        end_time = time()
        run_time = end_time - start_time
        print(f"func: {func.__name__!r} took: {run_time:.4f} secs")
        return value
    return wrapper_timer


__all__ = ['timer']
