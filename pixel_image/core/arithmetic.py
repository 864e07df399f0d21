"""Channel-generic arithmetic kernels.

Kernels take stacked channel arrays of shape (..., n), so the same code
serves one Pixel (shape (n,)) and a whole image (shape (h, w, n)). Each
per-channel operation goes through apply_to_channels() and clamp_cast()
exactly once.

Rounding: every multiply truncates toward zero when it lands in an integer
representation. blend() is two scalar multiplies and one accumulate, so
blending black and white 8-bit pixels at 0.5 gives 0 + 127 = 127 per colour
channel and 127 + 127 = 254 for alpha.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from pixel_image.core.channels import ImageFormat, apply_to_channels, layout_of
from pixel_image.core.numeric import clamp_cast, operand_dtype, promote, signed, wider


def _operand(value: Any, intermediate: np.dtype) -> np.ndarray:
    return np.asarray(value).astype(intermediate)


def scale(fmt: ImageFormat, sample: np.dtype, values: np.ndarray, num: Any) -> np.ndarray:
    """Per-channel values * num, clamped back into sample."""
    inter = promote(sample, operand_dtype(num))
    factor = _operand(num, inter)

    def mul(c):
        return clamp_cast(c.astype(inter) * factor, sample, inter)

    return apply_to_channels(mul, fmt, values)


def mac(fmt: ImageFormat, sample: np.dtype, acc: np.ndarray, other: np.ndarray, coeff: Any) -> np.ndarray:
    """Per-channel acc + other * coeff, clamped back into sample."""
    inter = promote(sample, operand_dtype(coeff))
    factor = _operand(coeff, inter)

    def accumulate(c, o):
        return clamp_cast(c.astype(inter) + o.astype(inter) * factor, sample, inter)

    return apply_to_channels(accumulate, fmt, acc, other)


def abs_diff(fmt: ImageFormat, sample: np.dtype, a: np.ndarray, b: np.ndarray) -> np.ndarray:
    inter = wider(signed(sample))

    def diff(x, y):
        return clamp_cast(np.abs(x.astype(inter) - y.astype(inter)), sample, inter)

    return apply_to_channels(diff, fmt, a, b)


def blend_weight(weight: float) -> float:
    """Clamp a blend weight to [0, 1]; NaN counts as 0."""
    weight = float(weight)
    return 0.0 if math.isnan(weight) else min(max(weight, 0.0), 1.0)


def blend(fmt: ImageFormat, sample: np.dtype, a: np.ndarray, b: np.ndarray, weight: float) -> np.ndarray:
    """a * weight + b * (1 - weight), weight clamped by blend_weight()."""
    weight = blend_weight(weight)
    left = scale(fmt, sample, a, weight)
    right = scale(fmt, sample, b, 1.0 - weight)
    return mac(fmt, sample, left, right, 1)


def invert(fmt: ImageFormat, sample: np.dtype, values: np.ndarray, peak: Any) -> np.ndarray:
    """peak - c on colour channels, alpha unchanged, clamped back into sample."""
    layout = layout_of(fmt)
    inter = promote(sample, operand_dtype(peak))
    offset = np.full(layout.size, peak, dtype=inter)
    offset[layout.alpha_index] = 0
    sign = np.full(layout.size, -1, dtype=inter)
    sign[layout.alpha_index] = 1

    def flip(c, o, s):
        return clamp_cast(o + s * c.astype(inter), sample, inter)

    return apply_to_channels(flip, fmt, values, offset, sign)


def squared_distance(fmt: ImageFormat, a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Sum of squared colour-channel differences, as uint64.

    Differences are taken in int64 after truncating each sample to an integer.
    """
    cols = layout_of(fmt).colour_slice
    diff = np.asarray(a)[..., cols].astype(np.int64) - np.asarray(b)[..., cols].astype(np.int64)
    mag = np.abs(diff).astype(np.uint64)
    return np.sum(mag * mag, axis=-1, dtype=np.uint64)


def l2_norm(fmt: ImageFormat, sample: np.dtype, a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Euclidean distance over colour channels, float64."""
    cols = layout_of(fmt).colour_slice
    inter = wider(signed(sample))
    diff = np.asarray(a)[..., cols].astype(inter) - np.asarray(b)[..., cols].astype(inter)
    diff = diff.astype(np.float64)
    return np.sqrt(np.sum(diff * diff, axis=-1))


def cast(values: np.ndarray, source: np.dtype, dest: np.dtype) -> np.ndarray:
    """Clamp-cast between representations of the same layout."""
    return clamp_cast(values, dest, promote(source, dest))
