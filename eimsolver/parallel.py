"""Thread-per-chunk parallel loop with first-error propagation.

The work handled here is closed-form arithmetic with near-uniform cost per
element, so the range is split statically into contiguous chunks, one thread
per chunk. Workers cooperate through a single abort flag: once any element
raises, the remaining workers stop consuming elements but are never
interrupted mid-element. The first exception is re-raised only after every
worker has been joined.
"""

from __future__ import annotations

import inspect
import logging
import os
import threading
from typing import Any, Callable, Iterable, List, Sequence

LOGGER = logging.getLogger(__name__)


def default_workers(size: int) -> int:
    """Hardware concurrency clamped to the number of elements."""

    return max(1, min(os.cpu_count() or 1, size))


def accepts_index(func: Callable[..., Any]) -> bool:
    """Return ``True`` when ``func`` requires ``(item, index)`` positionally.

    Only positional parameters without a default are counted, so
    ``f(item, scale=1.0)`` is called as ``f(item)``.
    """

    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return False
    positional = 0
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if (
            param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
            and param.default is inspect.Parameter.empty
        ):
            positional += 1
    return positional >= 2


def chunk_bounds(size: int, workers: int) -> List[tuple[int, int]]:
    """Contiguous ``(start, stop)`` pairs; the last chunk absorbs the remainder."""

    chunk = size // workers
    bounds = []
    start = 0
    for i in range(workers):
        stop = size if i == workers - 1 else start + chunk
        bounds.append((start, stop))
        start = stop
    return bounds


def parallel_for(
    items: Iterable[Any],
    func: Callable[..., Any],
    workers: int | None = None,
    progress: Callable[[int], Any] | None = None,
    with_index: bool | None = None,
) -> None:
    """Apply ``func`` to every element of ``items`` across worker threads.

    Parameters
    ----------
    items:
        Elements to process. Sized, indexable containers (``range``, lists,
        numpy arrays) are read in place; other iterables are materialised
        first.
    func:
        Called as ``func(item)`` or ``func(item, index)`` where ``index`` is the
        global position of ``item`` in ``items``.
    workers:
        Number of threads. Defaults to the hardware concurrency and is clamped
        to ``len(items)``.
    progress:
        Optional callback receiving the number of workers that finished their
        chunk so far. It may be called concurrently from several threads.
    with_index:
        Force the indexed (``True``) or plain (``False``) call form. ``None``
        inspects the signature of ``func``.

    Raises
    ------
    Exception
        The first exception raised by ``func`` (or ``progress``) in any worker,
        re-raised after all workers have been joined.
    """

    if not isinstance(items, Sequence) and not (hasattr(items, "__len__") and hasattr(items, "__getitem__")):
        items = list(items)
    size = len(items)
    if size == 0:
        return
    if workers is None:
        workers = default_workers(size)
    if workers < 1:
        raise ValueError(f"Worker count must be at least 1, got {workers}.")
    workers = min(workers, size)
    indexed = accepts_index(func) if with_index is None else with_index

    lock = threading.Lock()
    abort = threading.Event()
    errors: List[BaseException] = []
    completed = 0

    def _record(exc: BaseException) -> None:
        with lock:
            if not errors:
                errors.append(exc)
                abort.set()

    def _worker(start: int, stop: int) -> None:
        nonlocal completed
        try:
            for index in range(start, stop):
                if abort.is_set():
                    break
                if indexed:
                    func(items[index], index)
                else:
                    func(items[index])
            with lock:
                completed += 1
                done = completed
            if progress is not None:
                progress(done)
        except BaseException as exc:  # noqa: BLE001 - re-raised after join
            _record(exc)

    threads = [
        threading.Thread(target=_worker, args=bounds, name=f"parallel-for-{i}")
        for i, bounds in enumerate(chunk_bounds(size, workers))
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    if errors:
        LOGGER.debug("parallel_for aborted after %d/%d chunk(s): %r", completed, workers, errors[0])
        raise errors[0]


__all__ = ["parallel_for", "default_workers", "accepts_index", "chunk_bounds"]
