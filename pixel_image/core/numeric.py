"""Sample representations and the numeric promotion rule.

Every mixed-type operation picks an intermediate dtype with strictly more
range than either operand, computes there, then clamps into the destination
representation and truncates. The rule lives here once:

  1. either operand floating point      -> float64
  2. sizes differ, at least one signed  -> wider(signed(larger))
  3. sizes equal, signedness differs    -> wider(signed(either))
  4. otherwise                          -> wider(larger)

wider() steps one size up (u8->u16, i16->i32, i32->i64, f32->f64, ...) and
falls back to float64 when there is no wider integer.
"""

from __future__ import annotations

import numbers
from typing import Any

import numpy as np

from pixel_image.core.errors import UnsupportedSampleType

SAMPLE_TYPES: tuple[np.dtype, ...] = tuple(
    np.dtype(t) for t in (np.uint8, np.int16, np.uint16, np.int32, np.float32, np.float64)
)

_FLOAT64 = np.dtype(np.float64)

_WIDER: dict[np.dtype, np.dtype] = {
    np.dtype(np.uint8): np.dtype(np.uint16),
    np.dtype(np.int8): np.dtype(np.int16),
    np.dtype(np.uint16): np.dtype(np.uint32),
    np.dtype(np.int16): np.dtype(np.int32),
    np.dtype(np.uint32): np.dtype(np.uint64),
    np.dtype(np.int32): np.dtype(np.int64),
    np.dtype(np.float32): _FLOAT64,
}

_INT32 = np.iinfo(np.int32)
_INT64 = np.iinfo(np.int64)


def sample_dtype(sample: Any) -> np.dtype:
    """Resolve `sample` to one of SAMPLE_TYPES or raise UnsupportedSampleType."""
    try:
        dt = np.dtype(sample)
    except TypeError as e:
        raise UnsupportedSampleType(f'Not a sample representation: {sample!r}') from e
    if dt not in SAMPLE_TYPES:
        names = ', '.join(t.name for t in SAMPLE_TYPES)
        raise UnsupportedSampleType(f'Unsupported sample type {dt.name}. Supported: {names}')
    return dt


def wider(dt: np.dtype) -> np.dtype:
    return _WIDER.get(np.dtype(dt), _FLOAT64)


def signed(dt: np.dtype) -> np.dtype:
    """Signed counterpart of an unsigned integer dtype; other dtypes unchanged."""
    dt = np.dtype(dt)
    if dt.kind == 'u':
        return np.dtype(f'i{dt.itemsize}')
    return dt


def limits(dt: np.dtype) -> tuple[int | float, int | float]:
    """(lowest, max) representable by dt, as Python numbers."""
    dt = np.dtype(dt)
    if dt.kind == 'f':
        info = np.finfo(dt)
        return float(info.min), float(info.max)
    iinfo = np.iinfo(dt)
    return int(iinfo.min), int(iinfo.max)


def operand_dtype(value: Any) -> np.dtype:
    """The dtype a coefficient or scalar operand participates in promotion with.

    Python ints behave like a C int (int32) unless they need more room.
    """
    if isinstance(value, (bool, np.bool_)):
        return np.dtype(np.uint8)
    if isinstance(value, (np.generic, np.ndarray)):
        return value.dtype
    if isinstance(value, numbers.Integral):
        if _INT32.min <= value <= _INT32.max:
            return np.dtype(np.int32)
        if _INT64.min <= value <= _INT64.max:
            return np.dtype(np.int64)
        return _FLOAT64
    return _FLOAT64


def promote(t: np.dtype, t2: np.dtype) -> np.dtype:
    """Intermediate dtype for combining a `t` sample with a `t2` operand."""
    t, t2 = np.dtype(t), np.dtype(t2)
    if t.kind == 'f' or t2.kind == 'f':
        return _FLOAT64
    any_signed = t.kind == 'i' or t2.kind == 'i'
    if t.itemsize != t2.itemsize:
        larger = t if t.itemsize > t2.itemsize else t2
        return wider(signed(larger)) if any_signed else wider(larger)
    if t.kind != t2.kind:
        return wider(signed(t))
    return wider(t)


def clamp_cast(values: Any, dest: np.dtype, intermediate: np.dtype | None = None) -> np.ndarray:
    """Lift `values` into `intermediate`, clamp into dest's range, truncate to dest."""
    dest = np.dtype(dest)
    work = np.asarray(values)
    if intermediate is None:
        intermediate = promote(work.dtype, dest)
    work = work.astype(intermediate, copy=False)
    lo, hi = limits(dest)
    if np.dtype(intermediate).kind == 'u':
        lo = max(lo, 0)
    return np.asarray(np.clip(work, lo, hi)).astype(dest)
