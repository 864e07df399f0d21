"""Pixel — one sample point of a given ImageFormat and sample representation.

A Pixel is a small mutable value: a length-n numpy vector laid out by the
format's Layout, alpha last. Channels are read and written by name:

    p = Pixel(ImageFormat.RGB, 255, 0, 0)
    p.g = 128
    p.a  # 255, alpha defaults to the representation max (opaque)

Anything written is clamp-cast into the representation, so `p.r = 300` on an
8-bit pixel stores 255.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from pixel_image.core import arithmetic
from pixel_image.core.channels import ImageFormat, Layout, layout_of
from pixel_image.core.errors import IncompatibleChannelLayout
from pixel_image.core.numeric import clamp_cast, limits, sample_dtype


def _default_values(layout: Layout, sample: np.dtype) -> np.ndarray:
    values = np.zeros(layout.size, dtype=sample)
    values[layout.alpha_index] = limits(sample)[1]
    return values


class Pixel:
    __slots__ = ('fmt', 'sample', '_values')

    # keep numpy scalars from coercing a Pixel into an array in `np.float32(2) * p`
    __array_ufunc__ = None

    def __init__(self, fmt: ImageFormat | str, *values: Any, sample: Any = np.uint8):
        object.__setattr__(self, 'fmt', ImageFormat(fmt))
        object.__setattr__(self, 'sample', sample_dtype(sample))
        object.__setattr__(self, '_values', _default_values(self.layout, self.sample))
        if values:
            self.set(*values)

    @classmethod
    def zeros(cls, fmt: ImageFormat | str, sample: Any = np.uint8) -> Pixel:
        """All channels zero, alpha included (the identity operand for mac)."""
        pix = cls(fmt, sample=sample)
        pix._values[:] = 0
        return pix

    @classmethod
    def from_array(cls, fmt: ImageFormat | str, values: Any, sample: Any = None) -> Pixel:
        """Build from a full channel vector (alpha included)."""
        arr = np.asarray(values)
        pix = cls(fmt, sample=arr.dtype if sample is None else sample)
        if arr.shape != pix._values.shape:
            raise ValueError(f'Expected {pix.layout.size} channel values, got shape {arr.shape}')
        pix._values[:] = arr if arr.dtype == pix.sample else clamp_cast(arr, pix.sample)
        return pix

    @property
    def layout(self) -> Layout:
        return layout_of(self.fmt)

    @property
    def values(self) -> tuple:
        """Channel values in layout order, alpha last."""
        return tuple(self._values.tolist())

    def to_array(self) -> np.ndarray:
        return self._values.copy()

    # -- channel access -------------------------------------------------------

    def __getattr__(self, name: str) -> Any:
        if name.startswith('_'):
            raise AttributeError(name)
        idx = layout_of(object.__getattribute__(self, 'fmt')).index(name)
        return self._values[idx].item()

    def __setattr__(self, name: str, value: Any) -> None:
        if name in Pixel.__slots__:
            raise AttributeError(f'{name} is fixed at construction')
        idx = self.layout.index(name)
        self._values[idx] = clamp_cast(value, self.sample)

    def __iter__(self):
        return iter(self.values)

    def __len__(self) -> int:
        return self.layout.size

    # -- value semantics --------------------------------------------------------

    def copy(self) -> Pixel:
        return Pixel.from_array(self.fmt, self._values, self.sample)

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> Pixel:
        return self.copy()

    def _same_kind(self, other: Any) -> bool:
        return isinstance(other, Pixel) and other.fmt is self.fmt and other.sample == self.sample

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pixel):
            return NotImplemented
        return self._same_kind(other) and bool(np.array_equal(self._values, other._values))

    __hash__ = None  # mutable

    def __lt__(self, other: Pixel) -> bool:
        """True when every channel is strictly less (a partial order)."""
        if not self._same_kind(other):
            return NotImplemented
        return bool(np.all(self._values < other._values))

    def __le__(self, other: Pixel) -> bool:
        if not self._same_kind(other):
            return NotImplemented
        return bool(np.all(self._values <= other._values))

    def __repr__(self) -> str:
        parts = ', '.join(f'{n}={v}' for n, v in zip(self.layout.channels, self.values))
        return f'Pixel({self.fmt.name}, {self.sample.name}, {parts})'

    # -- operations -------------------------------------------------------------

    def set(self, *values: Any) -> None:
        """Overwrite channels.

        - one value per channel: every channel, alpha included
        - one value per colour channel: alpha becomes opaque
        - (v,) or (v, alpha) on multi-channel layouts: v in every colour channel
        """
        layout = self.layout
        n_colour = layout.size - 1
        alpha = limits(self.sample)[1]
        if len(values) == layout.size:
            new = list(values)
        elif len(values) == n_colour:
            new = [*values, alpha]
        elif len(values) in (1, 2):
            new = [values[0]] * n_colour + [values[1] if len(values) == 2 else alpha]
        else:
            raise TypeError(f'{self.fmt.name} pixel takes {n_colour} or {layout.size} values, got {len(values)}')
        self._values[:] = clamp_cast(np.asarray(new), self.sample)

    def mac(self, other: Pixel, coeff: Any) -> None:
        """In place: self += other * coeff, per channel, clamped."""
        other = self._coerce(other)
        self._values[:] = arithmetic.mac(self.fmt, self.sample, self._values, other._values, coeff)

    def squared_euclidean_distance(self, other: Pixel) -> int:
        other = self._coerce(other)
        return int(arithmetic.squared_distance(self.fmt, self._values, other._values))

    def astype(self, sample: Any) -> Pixel:
        """Clamp-cast into another representation of the same format."""
        dest = sample_dtype(sample)
        pix = Pixel(self.fmt, sample=dest)
        pix._values[:] = arithmetic.cast(self._values, self.sample, dest)
        return pix

    def _coerce(self, other: Pixel) -> Pixel:
        if other.fmt is not self.fmt:
            raise IncompatibleChannelLayout(f'Cannot combine {self.fmt.name} and {other.fmt.name} pixels')
        if other.sample != self.sample:
            return other.astype(self.sample)
        return other

    def __mul__(self, num: Any) -> Pixel:
        return multiply(self, num)

    __rmul__ = __mul__

    def __add__(self, other: Pixel) -> Pixel:
        if not isinstance(other, Pixel):
            return NotImplemented
        result = self.copy()
        result.mac(other, 1)
        return result


def multiply(pix: Pixel, num: Any) -> Pixel:
    """Per-channel multiply-then-clamp."""
    return Pixel.from_array(pix.fmt, arithmetic.scale(pix.fmt, pix.sample, pix._values, num), pix.sample)


def abs_diff(a: Pixel, b: Pixel) -> Pixel:
    b = a._coerce(b)
    return Pixel.from_array(a.fmt, arithmetic.abs_diff(a.fmt, a.sample, a._values, b._values), a.sample)


def blend_colors(a: Pixel, b: Pixel, weight: float) -> Pixel:
    """a * weight + b * (1 - weight); weight is clamped to [0, 1]."""
    b = a._coerce(b)
    return Pixel.from_array(a.fmt, arithmetic.blend(a.fmt, a.sample, a._values, b._values, weight), a.sample)


def l2_norm(a: Pixel, b: Pixel) -> float:
    b = a._coerce(b)
    return float(arithmetic.l2_norm(a.fmt, a.sample, a._values, b._values))
