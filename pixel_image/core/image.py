"""Image — an owned, strided 2-D buffer of pixels.

The buffer is one numpy array of shape (stride * height, n), n being the
layout size. Rows are `stride` pixels apart; only the first `width` pixels of
a row are image content, the rest is padding whose contents are undefined.

Addressing follows a silent contract: out-of-bounds set_pixel() is a no-op
and out-of-bounds get_pixel() returns the default pixel (zero colour, opaque
alpha). The *_strict accessors raise OutOfRangeAccess instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np

from pixel_image.core import arithmetic
from pixel_image.core.channels import ImageFormat, Layout, layout_of
from pixel_image.core.errors import (
    DimensionMismatch,
    IncompatibleChannelLayout,
    InvalidDimensions,
    OutOfRangeAccess,
)
from pixel_image.core.numeric import clamp_cast, sample_dtype
from pixel_image.core.pixel import Pixel


class BorderType(Enum):
    CONSTANT = 'constant'
    REPLICATE = 'replicate'
    REFLECT = 'reflect'


@dataclass(frozen=True)
class BorderMode:
    """How get_pixel() extrapolates outside the image.

    Holds its own copy of the fallback pixel; None means the default pixel.
    """

    kind: BorderType = BorderType.CONSTANT
    border_pixel: Pixel | None = field(default=None)

    def __post_init__(self) -> None:
        if self.border_pixel is not None:
            object.__setattr__(self, 'border_pixel', self.border_pixel.copy())


class ImageState(Enum):
    UNINITIALIZED = 'uninitialized'
    ALLOCATED = 'allocated'


def reflect_index(idx: int, max_idx: int) -> int:
    """Mirror idx about the nearest edge without repeating the edge pixel."""
    if idx < 0:
        return -idx - 1
    if idx >= max_idx:
        return max_idx - (idx - max_idx) - 1
    return idx


def border_indices(idx: np.ndarray, max_idx: int, kind: BorderType) -> np.ndarray:
    """Source index for every coordinate in `idx` under `kind`, as get_pixel() picks it.

    CONSTANT leaves indices alone; results may still fall outside [0, max_idx).
    """
    idx = np.asarray(idx)
    if kind is BorderType.REPLICATE:
        return np.clip(idx, 0, max_idx - 1)
    if kind is BorderType.REFLECT:
        return np.where(idx < 0, -idx - 1, np.where(idx >= max_idx, 2 * max_idx - idx - 1, idx))
    return idx


class Image:
    __array_ufunc__ = None

    def __init__(
        self,
        fmt: ImageFormat | str,
        sample: Any = np.uint8,
        width: int = 0,
        height: int = 0,
        stride: int = 0,
        fill: Pixel | None = None,
    ):
        self.fmt = ImageFormat(fmt)
        self.sample = sample_dtype(sample)
        self.source_channels: int | None = None
        self._reset()
        if width or height or stride:
            self.create(width, height, stride, fill)
        elif fill is not None:
            raise InvalidDimensions('fill given without width/height; call create() to size the image')

    def _reset(self) -> None:
        self.width = 0
        self.height = 0
        self.stride = 0
        self._data = np.empty((0, self.layout.size), dtype=self.sample)

    # -- properties -------------------------------------------------------------

    @property
    def layout(self) -> Layout:
        return layout_of(self.fmt)

    @property
    def channel_count(self) -> int:
        """Components exchanged with codecs for this format (not the in-memory size)."""
        return self.layout.codec_channels

    @property
    def state(self) -> ImageState:
        if self.width > 0 and self.height > 0:
            return ImageState.ALLOCATED
        return ImageState.UNINITIALIZED

    @property
    def size(self) -> int:
        return self.width * self.height

    def default_pixel(self) -> Pixel:
        return Pixel(self.fmt, sample=self.sample)

    def __repr__(self) -> str:
        return (
            f'Image({self.fmt.name}, {self.sample.name}, '
            f'width={self.width}, height={self.height}, stride={self.stride})'
        )

    # -- allocation -------------------------------------------------------------

    def create(self, width: int, height: int, stride: int = 0, fill: Pixel | None = None) -> None:
        """Reallocate as width x height, discarding prior contents.

        stride 0 means stride == width. Every cell, padding included, is set to
        `fill` (default pixel when omitted).
        """
        for name, value in (('width', width), ('height', height), ('stride', stride)):
            if value < 0:
                raise InvalidDimensions(f'{name} must be non-negative, got {value}')
        stride = stride or width
        if stride < width:
            raise InvalidDimensions(f'stride {stride} is narrower than width {width}')

        fill = self.default_pixel() if fill is None else self._coerce_pixel(fill)
        data = np.empty((stride * height, self.layout.size), dtype=self.sample)
        data[:] = fill._values

        self.width = width
        self.height = height
        self.stride = stride
        self._data = data

    def _adopt(self, width: int, height: int, pixels: np.ndarray) -> None:
        """Take ownership of an unpadded (width * height, n) pixel array."""
        self.width = width
        self.height = height
        self.stride = width
        self._data = np.ascontiguousarray(pixels, dtype=self.sample).reshape(width * height, self.layout.size)

    def _view(self) -> np.ndarray:
        """(height, width, n) view of the image content, excluding padding."""
        rows = self._data.reshape(self.height, self.stride, self.layout.size)
        return rows[:, : self.width]

    def to_array(self) -> np.ndarray:
        """Copy of the pixel content as a (height, width, n) array."""
        return self._view().copy()

    @classmethod
    def from_array(cls, fmt: ImageFormat | str, array: Any, sample: Any = None) -> Image:
        """Build an unpadded image from a (height, width, n) array."""
        arr = np.asarray(array)
        img = cls(fmt, sample=arr.dtype if sample is None else sample)
        if arr.ndim != 3 or arr.shape[2] != img.layout.size:
            raise IncompatibleChannelLayout(
                f'{img.fmt.name} needs shape (height, width, {img.layout.size}), got {arr.shape}'
            )
        height, width = arr.shape[:2]
        if arr.dtype != img.sample:
            arr = clamp_cast(arr, img.sample)
        img._adopt(width, height, arr.reshape(-1, img.layout.size).copy())
        return img

    # -- ownership --------------------------------------------------------------

    def copy(self) -> Image:
        """Deep copy, padding and stride included."""
        dup = Image(self.fmt, self.sample)
        dup.width, dup.height, dup.stride = self.width, self.height, self.stride
        dup._data = self._data.copy()
        dup.source_channels = self.source_channels
        return dup

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> Image:
        return self.copy()

    def move(self) -> Image:
        """Hand the buffer to a new Image and leave this one empty."""
        moved = Image(self.fmt, self.sample)
        moved.width, moved.height, moved.stride = self.width, self.height, self.stride
        moved._data = self._data
        moved.source_channels = self.source_channels
        self._reset()
        self.source_channels = None
        return moved

    def copy_from(self, source: Image) -> None:
        """Copy pixel content from an image of identical width and height.

        Equal strides copy the whole buffer at once; otherwise each row's
        `width` pixels are copied and padding is left alone.
        """
        self._check_compatible(source)
        src = source._data
        if source.sample != self.sample:
            src = arithmetic.cast(src, source.sample, self.sample)
        if self.stride == source.stride:
            self._data[:] = src
            return
        for y in range(self.height):
            dst_row = y * self.stride
            src_row = y * source.stride
            self._data[dst_row : dst_row + self.width] = src[src_row : src_row + self.width]

    def _check_compatible(self, other: Image) -> None:
        if other.fmt is not self.fmt:
            raise IncompatibleChannelLayout(f'Cannot combine {self.fmt.name} and {other.fmt.name} images')
        if (other.width, other.height) != (self.width, self.height):
            raise DimensionMismatch(
                f'Image is {self.width}x{self.height} but other is {other.width}x{other.height}'
            )

    def _coerce_pixel(self, pix: Pixel) -> Pixel:
        if pix.fmt is not self.fmt:
            raise IncompatibleChannelLayout(f'{pix.fmt.name} pixel in a {self.fmt.name} image')
        if pix.sample != self.sample:
            return pix.astype(self.sample)
        return pix

    # -- addressing -------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set_pixel(self, x: int, y: int, pix: Pixel) -> None:
        if self.in_bounds(x, y):
            self._data[y * self.stride + x] = self._coerce_pixel(pix)._values

    def set_pixel_at(self, index: int, pix: Pixel) -> None:
        """Row-major logical index over width * height; padding is skipped."""
        if 0 <= index < self.size:
            y, x = divmod(index, self.width)
            self.set_pixel(x, y, pix)

    def get_pixel(self, x: int, y: int, border: BorderMode | None = None) -> Pixel:
        if self.in_bounds(x, y):
            return Pixel.from_array(self.fmt, self._data[y * self.stride + x], self.sample)
        if border is None:
            return self.default_pixel()
        return self._extrapolate(x, y, border)

    def get_pixel_at(self, index: int) -> Pixel:
        if 0 <= index < self.size:
            y, x = divmod(index, self.width)
            return self.get_pixel(x, y)
        return self.default_pixel()

    def _extrapolate(self, x: int, y: int, border: BorderMode) -> Pixel:
        if border.kind is BorderType.CONSTANT:
            if border.border_pixel is None:
                return self.default_pixel()
            return self._coerce_pixel(border.border_pixel).copy()
        if border.kind is BorderType.REPLICATE:
            x_idx = min(max(x, 0), self.width - 1)
            y_idx = min(max(y, 0), self.height - 1)
            return self.get_pixel(x_idx, y_idx)
        if border.kind is BorderType.REFLECT:
            return self.get_pixel(reflect_index(x, self.width), reflect_index(y, self.height))
        return self.default_pixel()

    def get_pixel_strict(self, x: int, y: int) -> Pixel:
        if not self.in_bounds(x, y):
            raise OutOfRangeAccess(f'({x}, {y}) outside {self.width}x{self.height} image')
        return self.get_pixel(x, y)

    def set_pixel_strict(self, x: int, y: int, pix: Pixel) -> None:
        if not self.in_bounds(x, y):
            raise OutOfRangeAccess(f'({x}, {y}) outside {self.width}x{self.height} image')
        self.set_pixel(x, y, pix)

    # -- pixel-wise arithmetic --------------------------------------------------

    def _with_content(self, content: np.ndarray) -> Image:
        out = Image(self.fmt, self.sample)
        out._adopt(self.width, self.height, content.reshape(-1, self.layout.size))
        return out

    def _operand(self, other: Image) -> np.ndarray:
        self._check_compatible(other)
        content = other._view()
        if other.sample != self.sample:
            content = arithmetic.cast(content, other.sample, self.sample)
        return content

    def multiply(self, num: Any) -> Image:
        return self._with_content(arithmetic.scale(self.fmt, self.sample, self._view(), num))

    def __mul__(self, num: Any) -> Image:
        if isinstance(num, (Image, Pixel)):
            return NotImplemented
        return self.multiply(num)

    __rmul__ = __mul__

    def mac(self, other: Image, coeff: Any) -> None:
        """In place: self += other * coeff, pixel by pixel."""
        operand = self._operand(other)
        view = self._view()
        view[...] = arithmetic.mac(self.fmt, self.sample, view, operand, coeff)

    def abs_diff(self, other: Image) -> Image:
        operand = self._operand(other)
        return self._with_content(arithmetic.abs_diff(self.fmt, self.sample, self._view(), operand))

    def blend(self, other: Image, weight: float) -> Image:
        operand = self._operand(other)
        return self._with_content(arithmetic.blend(self.fmt, self.sample, self._view(), operand, weight))

    def l2_distance(self, other: Image) -> np.ndarray:
        """(height, width) float64 map of colour-channel Euclidean distances."""
        operand = self._operand(other)
        return arithmetic.l2_norm(self.fmt, self.sample, self._view(), operand)

    def astype(self, sample: Any) -> Image:
        dest = sample_dtype(sample)
        out = Image(self.fmt, dest)
        content = arithmetic.cast(self._view(), self.sample, dest)
        out._adopt(self.width, self.height, content.reshape(-1, self.layout.size))
        out.source_channels = self.source_channels
        return out

    # -- codec adapters ---------------------------------------------------------

    def load_from_file(self, path: str, **kwargs: Any) -> None:
        from pixel_image.core.imageio import load_from_file

        load_from_file(self, path, **kwargs)

    def save_to_file(self, path: str, alpha: bool = True, quality: int = 100, **kwargs: Any) -> None:
        from pixel_image.core.imageio import save_to_file

        save_to_file(self, path, alpha=alpha, quality=quality, **kwargs)
