"""Channel layouts and the one generic channel dispatcher.

Every layout is described by a row in LAYOUTS: its channel names in storage
order (alpha last), which channel (if any) is a hue, and how many components
the codec boundary exchanges for it. apply_to_channels() is the only place
that walks a layout channel by channel.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import numpy as np

HUE_PERIOD = 360


class ImageFormat(Enum):
    GRAY = 'gray'
    RGB = 'rgb'
    YCrCb = 'ycrcb'
    HSV = 'hsv'
    HLS = 'hls'


@dataclass(frozen=True)
class Layout:
    """Ordered channel names for one ImageFormat."""

    channels: tuple[str, ...]  # storage order, alpha last
    codec_channels: int  # components exchanged with encoders/decoders
    hue: str | None = None  # channel reduced modulo HUE_PERIOD

    @property
    def size(self) -> int:
        return len(self.channels)

    @property
    def colour_channels(self) -> tuple[str, ...]:
        return self.channels[:-1]

    @property
    def colour_slice(self) -> slice:
        return slice(0, self.size - 1)

    @property
    def alpha_index(self) -> int:
        return self.size - 1

    def index(self, name: str) -> int:
        try:
            return self.channels.index(name)
        except ValueError:
            raise AttributeError(f'Channel {name!r} not in layout {self.channels}') from None


LAYOUTS: dict[ImageFormat, Layout] = {
    ImageFormat.GRAY: Layout(channels=('v', 'a'), codec_channels=2),
    ImageFormat.RGB: Layout(channels=('r', 'g', 'b', 'a'), codec_channels=4),
    # YCrCb carries an in-memory alpha but exchanges 3 components with codecs
    ImageFormat.YCrCb: Layout(channels=('y', 'cr', 'cb', 'a'), codec_channels=3),
    ImageFormat.HSV: Layout(channels=('h', 's', 'v', 'a'), codec_channels=4, hue='h'),
    ImageFormat.HLS: Layout(channels=('h', 'l', 's', 'a'), codec_channels=4, hue='h'),
}


def layout_of(fmt: ImageFormat | str) -> Layout:
    return LAYOUTS[ImageFormat(fmt)]


def _wrap_hue(values: np.ndarray) -> np.ndarray:
    dt = values.dtype
    if dt.kind in 'ui' and np.iinfo(dt).max < HUE_PERIOD:
        return values
    return np.mod(values, np.asarray(HUE_PERIOD, dtype=dt))


def apply_to_channels(func: Callable[..., np.ndarray], fmt: ImageFormat, *inputs: np.ndarray) -> np.ndarray:
    """Apply `func` channel by channel across `inputs`, in layout order.

    Each input has shape (..., n) with n the layout size; `func` receives one
    (...)-shaped slice per input and returns the result channel. Hue results
    are reduced modulo 360 (non-negative) after `func` runs.
    """
    layout = LAYOUTS[fmt]
    arrays = [np.asarray(x) for x in inputs]
    columns = []
    for i, name in enumerate(layout.channels):
        out = np.asarray(func(*(a[..., i] for a in arrays)))
        if name == layout.hue:
            out = _wrap_hue(out)
        columns.append(out)
    return np.stack(columns, axis=-1)
