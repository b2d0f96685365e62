"""Escape-time evaluation of the Mandelbrot recurrence and its color mapping."""

from __future__ import annotations

import numpy as np
import tensorflow as tf

from .buffer import Color, OPAQUE

MAX_ITERATIONS = 255
ESCAPE_RADIUS = 100.0


def escape_count(c: complex, max_iterations: int = MAX_ITERATIONS, escape_radius: float = ESCAPE_RADIUS) -> int:
    """Count iterations of ``z = z*z + c`` (starting from ``z = c``) before ``|z|`` exceeds the radius.

    Returns 0 when the first iterate already escapes and ``max_iterations``
    when the orbit never does. A point escaping on the last allowed step gets
    ``max_iterations - 1``, one shade below the set itself; the coloring does
    not tell the two apart, which keeps the set boundary smooth.
    """

    z = c
    for i in range(max_iterations):
        z = z * z + c
        if abs(z) > escape_radius:
            return i
    return max_iterations


@tf.function
def _escape_step(zs: tf.Tensor, cs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor, radius: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every point that has not escaped by one iteration."""

    zs_new = zs * zs + cs
    zs = tf.where(active, zs_new, zs)
    escaped = tf.logical_and(active, tf.abs(zs) > radius)
    active = tf.logical_and(active, tf.logical_not(escaped))
    ns = ns + tf.cast(active, tf.int32)
    return zs, ns, active


@tf.function(
    input_signature=(
        tf.TensorSpec(shape=[None, None], dtype=tf.complex128),
        tf.TensorSpec(shape=[], dtype=tf.int32),
        tf.TensorSpec(shape=[], dtype=tf.float64),
    )
)
def _escape_run(cs: tf.Tensor, max_iterations: tf.Tensor, radius: tf.Tensor) -> tf.Tensor:
    i = tf.constant(0, dtype=tf.int32)
    zs = tf.identity(cs)
    ns = tf.zeros(tf.shape(cs), dtype=tf.int32)
    active = tf.ones_like(ns, tf.bool)

    def cond(i: tf.Tensor, zs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor) -> tf.Tensor:
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i: tf.Tensor, zs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
        zs, ns, active = _escape_step(zs, cs, ns, active, radius)
        return i + 1, zs, ns, active

    _, _, ns, _ = tf.while_loop(cond, body, (i, zs, ns, active))
    return ns


def escape_counts(points: np.ndarray, max_iterations: int = MAX_ITERATIONS, escape_radius: float = ESCAPE_RADIUS) -> np.ndarray:
    """Vectorized :func:`escape_count` over a 2D array of complex points."""

    points = np.asarray(points, dtype=np.complex128)
    if points.ndim != 2:
        raise ValueError(f"expected a 2D array of points, got {points.ndim} dimensions")
    if points.size == 0:
        return np.zeros(points.shape, dtype=np.int32)

    with tf.device("/CPU:0"):
        cs = tf.convert_to_tensor(points, dtype=tf.complex128)
        ns = _escape_run(
            cs,
            tf.constant(max_iterations, dtype=tf.int32),
            tf.constant(escape_radius, dtype=tf.float64),
        )
    return ns.numpy()


def shade(count: int) -> Color:
    """Fixed cyan ramp: the count, clamped to a byte, drives green and blue."""

    v = min(max(int(count), 0), 255)
    return 0, v, v, OPAQUE


def shade_counts(counts: np.ndarray) -> np.ndarray:
    """Apply :func:`shade` to an array of counts, adding a trailing RGBA axis."""

    v = np.clip(counts, 0, 255).astype(np.uint8)
    rgba = np.zeros(v.shape + (4,), dtype=np.uint8)
    rgba[..., 1] = v
    rgba[..., 2] = v
    rgba[..., 3] = OPAQUE
    return rgba
