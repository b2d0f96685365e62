"""Box-filter reduction of a supersampled buffer."""

from __future__ import annotations

import numpy as np

from .buffer import OPAQUE, PixelBuffer
from .errors import ConfigurationError


def downscale(buffer: PixelBuffer, scale: int) -> PixelBuffer:
    """Average each ``scale`` x ``scale`` block of ``buffer`` into one pixel.

    Channel means are truncated toward zero and the output is fully opaque.
    Rows and columns beyond the last whole block are dropped.
    """

    if scale < 1:
        raise ConfigurationError(f"scale must be at least 1, got {scale}")
    out_width = buffer.width // scale
    out_height = buffer.height // scale
    if out_width == 0 or out_height == 0:
        raise ConfigurationError(f"a {buffer.width}x{buffer.height} buffer is smaller than one {scale}x{scale} block")

    samples = scale * scale
    rgb = buffer.as_array()[:out_height * scale, :out_width * scale, :3]
    blocks = rgb.reshape(out_height, scale, out_width, scale, 3).astype(np.int64)
    mean = blocks.sum(axis=(1, 3)) // samples

    out = PixelBuffer(out_width, out_height)
    pixels = out.as_array()
    pixels[..., :3] = np.clip(mean, 0, 255).astype(np.uint8)
    pixels[..., 3] = OPAQUE
    return out
