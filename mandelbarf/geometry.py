"""Mapping between pixel indices and the complex plane."""

from __future__ import annotations

from dataclasses import dataclass, replace

import numpy as np

from .errors import ConfigurationError


def linear(p, n: int, lo: float, hi: float):
    """Map pixel index ``p`` in ``[0, n - 1]`` onto ``[lo, hi]``.

    The first and last index land exactly on ``lo`` and ``hi``. ``p`` may be
    an integer or a numpy array of indices.
    """

    if n < 2:
        raise ConfigurationError(f"cannot map a {n}-pixel axis onto an interval")
    t = p / (n - 1)
    return lo * (1 - t) + hi * t


@dataclass(frozen=True)
class Viewport:
    """Rectangle of the complex plane covered by the image."""

    real_min: float
    real_max: float
    imag_min: float
    imag_max: float

    @property
    def real_extent(self) -> float:
        return self.real_max - self.real_min

    @property
    def imag_extent(self) -> float:
        return self.imag_max - self.imag_min

    def validate(self) -> None:
        values = np.array([self.real_min, self.real_max, self.imag_min, self.imag_max], dtype=np.float64)
        if not np.all(np.isfinite(values)):
            raise ConfigurationError(f"viewport bounds must be finite: {self}")
        if self.real_extent <= 0 or self.imag_extent <= 0:
            raise ConfigurationError(f"viewport must have positive extent on both axes: {self}")

    def lock_aspect(self, cols: int, rows: int) -> "Viewport":
        """Resize the imaginary axis so one pixel covers the same distance on both axes."""

        if cols <= 0 or rows <= 0:
            raise ConfigurationError(f"cannot lock aspect to a {cols}x{rows} image")
        imag_extent = np.float64(self.real_extent) * np.float64(rows) / np.float64(cols)
        imag_center = (np.float64(self.imag_min) + np.float64(self.imag_max)) / 2.0
        return replace(
            self,
            imag_min=float(imag_center - imag_extent / 2.0),
            imag_max=float(imag_center + imag_extent / 2.0),
        )

    def pixel_to_complex(self, col: int, row: int, cols: int, rows: int) -> complex:
        """Return the point under pixel ``(col, row)``; row 0 is the top edge."""

        return complex(
            linear(col, cols, self.real_min, self.real_max),
            linear(row, rows, self.imag_max, self.imag_min),
        )

    def grid(self, cols: int, rows: int, start: int, stop: int) -> np.ndarray:
        """Complex points for rows ``[start, stop)`` as a ``(stop - start, cols)`` array."""

        real = linear(np.arange(cols, dtype=np.float64), cols, self.real_min, self.real_max)
        imag = linear(np.arange(start, stop, dtype=np.float64), rows, self.imag_max, self.imag_min)
        points = np.empty((len(imag), cols), dtype=np.complex128)
        points.real = real[np.newaxis, :]
        points.imag = imag[:, np.newaxis]
        return points


REFERENCE_VIEWPORT = Viewport(real_min=-2.0, real_max=1.0, imag_min=-1.0, imag_max=1.0)
