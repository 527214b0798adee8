"""Executor factory for page extraction."""

from __future__ import annotations

from concurrent import futures
from typing import Optional, Tuple

Executor = futures.Executor


def create_executor(workers: int) -> Tuple[Optional[Executor], bool]:
    """
    Return an executor for extracting pages concurrently.

    Args:
        workers: Desired concurrency level. One worker means extraction runs
            inline on the calling thread and no executor is created.

    Returns:
        Tuple of (executor, needs_shutdown). Caller is responsible for shutting
        down the returned executor when ``needs_shutdown`` is ``True``.
    """
    if workers <= 1:
        return None, False
    return futures.ThreadPoolExecutor(max_workers=workers, thread_name_prefix="docstoapi-extract"), True
