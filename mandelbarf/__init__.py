"""Public API for supersampled, multi-threaded Mandelbrot rendering."""

from .buffer import SENTINEL, PixelBuffer
from .downscale import downscale
from .errors import ConfigurationError, MandelbarfError, RenderCancelled, RenderError
from .escape import ESCAPE_RADIUS, MAX_ITERATIONS, escape_count, escape_counts, shade, shade_counts
from .geometry import REFERENCE_VIEWPORT, Viewport, linear
from .renderer import BACKENDS, RenderParameters, pixel_shader, render, tensor_shader, write_png
from .scheduler import RowRange, partition_rows, render_chunks

__all__ = [
    "BACKENDS",
    "ConfigurationError",
    "ESCAPE_RADIUS",
    "MAX_ITERATIONS",
    "MandelbarfError",
    "PixelBuffer",
    "REFERENCE_VIEWPORT",
    "RenderCancelled",
    "RenderError",
    "RenderParameters",
    "RowRange",
    "SENTINEL",
    "Viewport",
    "downscale",
    "escape_count",
    "escape_counts",
    "linear",
    "partition_rows",
    "pixel_shader",
    "render",
    "render_chunks",
    "shade",
    "shade_counts",
    "tensor_shader",
    "write_png",
]
