"""Render pipeline: parameters, per-row shaders, scheduling and downscaling."""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Callable, Optional, Union

import numpy as np

from .buffer import PixelBuffer
from .downscale import downscale
from .errors import ConfigurationError
from .escape import ESCAPE_RADIUS, MAX_ITERATIONS, escape_count, escape_counts, shade, shade_counts
from .geometry import REFERENCE_VIEWPORT, Viewport
from .scheduler import RowRange, Shader, render_chunks

BACKENDS = ("tensorflow", "python")


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe a single render of the Mandelbrot set."""

    cols: int
    rows: int
    scale: int = 6
    workers: int = 6
    chunks: int = 100
    max_iterations: int = MAX_ITERATIONS
    escape_radius: float = ESCAPE_RADIUS
    viewport: Viewport = field(default=REFERENCE_VIEWPORT)
    backend: str = "tensorflow"

    @property
    def supersampled_size(self) -> tuple[int, int]:
        return self.cols * self.scale, self.rows * self.scale

    def validate(self) -> None:
        """Raise :class:`ConfigurationError` if these parameters cannot be rendered."""

        for name, lowest in (("cols", 1), ("rows", 1), ("scale", 1), ("workers", 1), ("chunks", 1), ("max_iterations", 0)):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < lowest:
                raise ConfigurationError(f"{name} must be an integer of at least {lowest}, got {value!r}")
        if not np.isfinite(self.escape_radius) or self.escape_radius <= 0:
            raise ConfigurationError(f"escape_radius must be positive, got {self.escape_radius}")
        width, height = self.supersampled_size
        if width < 2 or height < 2:
            raise ConfigurationError(
                f"supersampled size {width}x{height} needs at least 2 pixels per axis to span the viewport"
            )
        if self.backend not in BACKENDS:
            raise ConfigurationError(f"unknown backend {self.backend!r}; choose from {', '.join(BACKENDS)}")
        self.viewport.validate()


def tensor_shader(params: RenderParameters) -> Shader:
    """Shade whole row bands at once with the TensorFlow escape loop."""

    width, height = params.supersampled_size

    def shade_rows(row_range: RowRange) -> np.ndarray:
        points = params.viewport.grid(width, height, row_range.start, row_range.stop)
        counts = escape_counts(points, params.max_iterations, params.escape_radius)
        return shade_counts(counts)

    return shade_rows


def pixel_shader(params: RenderParameters) -> Shader:
    """Shade one pixel at a time in plain Python."""

    width, height = params.supersampled_size

    def shade_rows(row_range: RowRange) -> np.ndarray:
        block = np.empty((len(row_range), width, 4), dtype=np.uint8)
        for offset, row in enumerate(range(row_range.start, row_range.stop)):
            for col in range(width):
                point = params.viewport.pixel_to_complex(col, row, width, height)
                block[offset, col] = shade(escape_count(point, params.max_iterations, params.escape_radius))
        return block

    return shade_rows


_SHADERS = {"tensorflow": tensor_shader, "python": pixel_shader}


def render(
    params: RenderParameters,
    *,
    cancel: Optional[threading.Event] = None,
    on_chunk: Optional[Callable[[RowRange], None]] = None,
) -> PixelBuffer:
    """Render ``params`` at ``scale`` times the output size and box-filter it down."""

    params.validate()
    width, height = params.supersampled_size
    canvas = PixelBuffer(width, height)
    render_chunks(
        canvas,
        _SHADERS[params.backend](params),
        params.chunks,
        params.workers,
        cancel=cancel,
        on_chunk=on_chunk,
    )
    return downscale(canvas, params.scale)


def write_png(buffer: PixelBuffer, sink: Union[str, os.PathLike, BinaryIO]) -> None:
    """Encode ``buffer`` as PNG into a path or a writable binary file object."""

    image = buffer.to_image()
    if isinstance(sink, (str, os.PathLike)):
        path = Path(sink)
        path.parent.mkdir(parents=True, exist_ok=True)
        image.save(str(path), format="PNG")
    else:
        image.save(sink, format="PNG")
