"""Load and save Images through the codec boundary.

Loading validates the decoded channel count against the image's format and
converts every sample before the image is touched, so a failed load leaves
the target unchanged. Samples are clamp-cast into the image's representation
(values are kept, not rescaled); missing alpha becomes opaque.

YCrCb alpha is synthetic: a 4th decoded channel is ignored on load and
alpha is never written on save.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import numpy as np

from pixel_image.core import arithmetic
from pixel_image.core.channels import ImageFormat, layout_of
from pixel_image.core.codecs import DecodedImage, decode, encode
from pixel_image.core.errors import DecodeError, EncodeError, IncompatibleChannelLayout
from pixel_image.core.image import Image, ImageState
from pixel_image.core.numeric import limits

logger = logging.getLogger(__name__)


def accepted_channel_counts(fmt: ImageFormat) -> tuple[int, ...]:
    return (1, 2) if fmt is ImageFormat.GRAY else (3, 4)


def check_channel_count(fmt: ImageFormat, channel_count: int, source: str = '') -> None:
    allowed = accepted_channel_counts(fmt)
    if channel_count not in allowed:
        where = f'{source}: ' if source else ''
        raise IncompatibleChannelLayout(
            f'{where}number of channels ({channel_count}) is not compatible with the image format ({fmt.name})'
        )


def unpack_samples(fmt: ImageFormat, sample: np.dtype, decoded: DecodedImage) -> np.ndarray:
    """Interleaved codec samples -> (width * height, n) pixel rows."""
    layout = layout_of(fmt)
    raw = np.asarray(decoded.samples)
    expected = decoded.width * decoded.height * decoded.channel_count
    if raw.size != expected:
        raise DecodeError(f'Decoder returned {raw.size} samples, expected {expected}')
    raw = raw.reshape(-1, decoded.channel_count)

    n_colour = layout.size - 1
    pixels = np.empty((raw.shape[0], layout.size), dtype=sample)
    pixels[:, :n_colour] = arithmetic.cast(raw[:, :n_colour], raw.dtype, sample)

    if decoded.channel_count > n_colour and fmt is not ImageFormat.YCrCb:
        pixels[:, layout.alpha_index] = arithmetic.cast(raw[:, n_colour], raw.dtype, sample)
    else:
        pixels[:, layout.alpha_index] = limits(sample)[1]
    return pixels


def load_from_file(image: Image, path: str, decoder: Callable[[str], DecodedImage] = decode) -> None:
    """Replace `image` with the decoded contents of `path`."""
    decoded = decoder(path)
    check_channel_count(image.fmt, decoded.channel_count, path)
    pixels = unpack_samples(image.fmt, image.sample, decoded)

    image._adopt(decoded.width, decoded.height, pixels)
    image.source_channels = decoded.channel_count
    logger.debug(
        'loaded %s into %s/%s image (%dx%d)', path, image.fmt.name, image.sample.name, image.width, image.height
    )


def pack_samples(image: Image, alpha: bool = True) -> tuple[int, np.ndarray]:
    """(channel_count, flat uint8 samples) for the codec boundary."""
    layout = image.layout
    components = list(range(layout.size - 1))
    if alpha and image.fmt is not ImageFormat.YCrCb:
        components.append(layout.alpha_index)
    content = image.to_array()[..., components]
    samples = arithmetic.cast(content, image.sample, np.dtype(np.uint8))
    return len(components), samples.reshape(-1)


def save_to_file(
    image: Image,
    path: str,
    alpha: bool = True,
    quality: int = 100,
    encoder: Callable[..., None] = encode,
) -> None:
    """Write `image` to `path`; the codec is picked from the extension."""
    if image.state is ImageState.UNINITIALIZED:
        raise EncodeError(f'Cannot save {path}: invalid image data or dimensions ({image.width}x{image.height})')
    channel_count, samples = pack_samples(image, alpha)
    encoder(path, image.width, image.height, channel_count, samples, quality)
    logger.debug('saved %s (%d component(s))', path, channel_count)
