from typing import Callable

import joblib
import numpy as onp

from ..core.typing import Array

__all__ = ["Parallel", "get_global_parallel", "map_index_chunks"]


class Parallel(object):
    """Process-wide default for the number of worker threads."""
    def __init__(self, num_threads:int = 1):
        self.set_num_threads(num_threads)

    def set_num_threads(self, num_threads:int):
        if num_threads < 1:
            raise ValueError("Number of threads must be positive, got %d." % num_threads)
        self.num_threads = num_threads

    def get_num_threads(self) -> int:
        return self.num_threads


_global_parallel = Parallel()


def get_global_parallel() -> Parallel:
    return _global_parallel


def map_index_chunks(fn:Callable[[Array], Array], num_items:int, num_threads:int = None) -> Array:
    """Apply `fn` to contiguous chunks of range(num_items) on a pool of threads.

    `fn` receives an array of item indices and returns an array whose first
    axis has one entry per index. Chunk results are concatenated in index
    order, so the output does not depend on the number of threads.

    Args:
        fn: Per-chunk work function.
        num_items: Number of items to split.
        num_threads: Number of worker threads. Defaults to the global setting.

    Returns:
        Concatenated per-item results.
    """
    if num_threads is None:
        num_threads = get_global_parallel().get_num_threads()
    if num_threads < 1:
        raise ValueError("Number of threads must be positive, got %d." % num_threads)

    num_chunks = max(1, min(num_threads, num_items))
    chunks = onp.array_split(onp.arange(num_items), num_chunks)

    # threads share the kernel and its point sets, results come back in chunk order
    results = joblib.Parallel(n_jobs=num_chunks, prefer="threads")(
        joblib.delayed(fn)(c) for c in chunks
    )
    return onp.concatenate([onp.asarray(r) for r in results])
