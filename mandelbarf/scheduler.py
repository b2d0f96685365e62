"""Split an image into row chunks and render them on a pool of worker threads.

Every chunk covers a half-open band of rows and the bands produced by
:func:`partition_rows` never overlap, so workers write their results straight
into the shared :class:`~mandelbarf.buffer.PixelBuffer` without a lock. The
work queue is the only synchronized object.
"""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .buffer import PixelBuffer
from .errors import ConfigurationError, RenderCancelled, RenderError


@dataclass(frozen=True)
class RowRange:
    """Rows ``[start, stop)`` of the render buffer."""

    start: int
    stop: int

    def __len__(self) -> int:
        return self.stop - self.start


Shader = Callable[[RowRange], np.ndarray]


def partition_rows(height: int, chunks: int) -> list[RowRange]:
    """Cut ``height`` rows into ``chunks`` bands of ``height // chunks`` rows.

    Leftover rows go to the final band, whose stop is always ``height``.
    """

    if chunks < 1:
        raise ConfigurationError(f"chunk count must be at least 1, got {chunks}")
    if height < 0:
        raise ConfigurationError(f"height must not be negative, got {height}")

    chunk_rows = height // chunks
    ranges = [RowRange(i * chunk_rows, (i + 1) * chunk_rows) for i in range(chunks - 1)]
    ranges.append(RowRange((chunks - 1) * chunk_rows, height))
    return ranges


def _render_range(buffer: PixelBuffer, shader: Shader, row_range: RowRange) -> None:
    if not len(row_range):
        return
    block = shader(row_range)
    expected = (len(row_range), buffer.width, 4)
    if block.shape != expected:
        raise ValueError(f"shader returned shape {block.shape} for rows {row_range}, expected {expected}")
    buffer.rows(row_range.start, row_range.stop)[...] = block


def render_chunks(
    buffer: PixelBuffer,
    shader: Shader,
    chunks: int,
    workers: int,
    *,
    cancel: Optional[threading.Event] = None,
    on_chunk: Optional[Callable[[RowRange], None]] = None,
) -> None:
    """Fill ``buffer`` by running ``shader`` over ``chunks`` row bands on ``workers`` threads.

    Blocks until every worker has drained the queue. A failing worker is
    reported as :class:`RenderError` once all workers have stopped; setting
    ``cancel`` makes workers stop taking chunks and raises
    :class:`RenderCancelled`.
    """

    if workers < 1:
        raise ConfigurationError(f"worker count must be at least 1, got {workers}")

    ranges = partition_rows(buffer.height, chunks)

    # Everything is enqueued before the first worker starts, so an empty
    # queue means there is no more work.
    pending: queue.Queue[RowRange] = queue.Queue(maxsize=chunks)
    for row_range in ranges:
        pending.put_nowait(row_range)

    failures: list[BaseException] = []
    failures_lock = threading.Lock()

    def work() -> None:
        while cancel is None or not cancel.is_set():
            try:
                row_range = pending.get_nowait()
            except queue.Empty:
                return
            try:
                _render_range(buffer, shader, row_range)
                if on_chunk is not None:
                    on_chunk(row_range)
            except Exception as exc:
                with failures_lock:
                    failures.append(exc)
                return

    threads = [threading.Thread(target=work, name=f"mandelbarf-worker-{i}", daemon=True) for i in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    if failures:
        raise RenderError(f"{len(failures)} worker(s) failed while rendering") from failures[0]
    if cancel is not None and cancel.is_set() and not pending.empty():
        raise RenderCancelled(f"rendering cancelled with {pending.qsize()} chunk(s) left")
    if not pending.empty():
        raise RenderError(f"workers stopped with {pending.qsize()} chunk(s) left unrendered")
