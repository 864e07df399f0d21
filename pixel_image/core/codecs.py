"""Codec boundary — decode and encode interleaved samples with Pillow.

This module knows nothing about Pixel or Image. It exchanges plain
(width, height, channel_count, samples) tuples, samples being a flat
interleaved numpy array, and routes writes by file extension:

  bmp           Pillow BMP (2-channel input is widened to RGBA)
  png           Pillow PNG
  jpg / jpeg    Pillow JPEG at `quality`, alpha dropped
  pgm           raw binary greyscale: b'P5\\n<w> <h>\\n<max>\\n' + samples

Decoding returns the file's native depth: uint8, uint16 for 16-bit
greyscale, float32 for float images. Palette and other Pillow modes are
expanded to L/LA/RGB/RGBA first.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np
from PIL import Image

from pixel_image.core.errors import DecodeError, EncodeError

logger = logging.getLogger(__name__)

_DIRECT_MODES = {'L', 'LA', 'RGB', 'RGBA'}


@dataclass
class DecodedImage:
    width: int
    height: int
    channel_count: int
    samples: np.ndarray  # flat, interleaved, row-major


def extension_of(path: str) -> str:
    """Lower-case extension without the dot ('' when there is none)."""
    return os.path.splitext(path)[1].lstrip('.').lower()


def _pil_samples(img: Image.Image) -> np.ndarray:
    """Return an (h, w, c) array for a Pillow image, expanding exotic modes."""
    mode = img.mode
    if mode in _DIRECT_MODES:
        arr = np.asarray(img)
    elif mode.startswith('I;16'):
        arr = np.asarray(img).astype(np.uint16)
    elif mode == 'I':
        arr = np.clip(np.asarray(img), 0, 65535).astype(np.uint16)
    elif mode == 'F':
        arr = np.asarray(img, dtype=np.float32)
    elif mode == '1':
        arr = np.asarray(img.convert('L'))
    elif mode in ('P', 'PA'):
        has_alpha = mode == 'PA' or 'transparency' in img.info
        arr = np.asarray(img.convert('RGBA' if has_alpha else 'RGB'))
    else:
        arr = np.asarray(img.convert('RGBA' if 'A' in mode else 'RGB'))
    if arr.ndim == 2:
        arr = arr[..., np.newaxis]
    return arr


def decode(path: str) -> DecodedImage:
    """Read an image file into interleaved samples. Raises DecodeError."""
    try:
        with Image.open(path) as img:
            img.load()
            arr = _pil_samples(img)
    except (OSError, ValueError, SyntaxError) as e:
        raise DecodeError(f'Error loading image file {path}: {e}') from e

    height, width, channels = arr.shape
    logger.debug('decoded %s: %dx%d, %d channel(s), %s', path, width, height, channels, arr.dtype)
    return DecodedImage(
        width=width,
        height=height,
        channel_count=channels,
        samples=np.ascontiguousarray(arr).reshape(-1),
    )


def _to_pil(arr: np.ndarray) -> Image.Image:
    if arr.dtype != np.uint8:
        raise EncodeError(f'Only 8-bit samples can be written with this format, got {arr.dtype}')
    if arr.shape[2] == 1:
        arr = arr[..., 0]
    return Image.fromarray(np.ascontiguousarray(arr))


def _write_png(path: str, arr: np.ndarray, quality: int) -> None:
    _to_pil(arr).save(path, format='PNG')


def _write_bmp(path: str, arr: np.ndarray, quality: int) -> None:
    img = _to_pil(arr)
    if img.mode == 'LA':
        img = img.convert('RGBA')
    img.save(path, format='BMP')


def _write_jpeg(path: str, arr: np.ndarray, quality: int) -> None:
    img = _to_pil(arr)
    if img.mode in ('LA', 'RGBA'):
        img = img.convert(img.mode[:-1])
    img.save(path, format='JPEG', quality=quality)


def _write_pgm(path: str, arr: np.ndarray, quality: int) -> None:
    if arr.shape[2] != 1:
        raise EncodeError(f'PGM holds a single channel, got {arr.shape[2]}')
    if arr.dtype == np.uint8:
        payload = arr.tobytes()
    elif arr.dtype == np.uint16:
        payload = arr.astype('>u2').tobytes()
    else:
        raise EncodeError(f'PGM supports uint8 or uint16 samples, got {arr.dtype}')
    height, width = arr.shape[:2]
    header = f'P5\n{width} {height}\n{np.iinfo(arr.dtype).max}\n'.encode('ascii')
    with open(path, 'wb') as f:
        f.write(header)
        f.write(payload)


_WRITERS: dict[str, Callable[[str, np.ndarray, int], None]] = {
    'bmp': _write_bmp,
    'png': _write_png,
    'jpg': _write_jpeg,
    'jpeg': _write_jpeg,
    'pgm': _write_pgm,
}


def supported_extensions() -> list[str]:
    return sorted(_WRITERS)


def encode(
    path: str,
    width: int,
    height: int,
    channel_count: int,
    samples: np.ndarray,
    quality: int = 100,
) -> None:
    """Write interleaved samples to `path`, format chosen by extension. Raises EncodeError."""
    ext = extension_of(path)
    writer = _WRITERS.get(ext)
    if writer is None:
        raise EncodeError(f"Unsupported file extension '{ext}'. Supported: {', '.join(supported_extensions())}")
    if channel_count not in (1, 2, 3, 4):
        raise EncodeError(f'Cannot encode {channel_count} channels')
    arr = np.asarray(samples)
    if width <= 0 or height <= 0 or arr.size != width * height * channel_count:
        raise EncodeError(f'{arr.size} samples do not describe a {width}x{height}x{channel_count} image')

    try:
        writer(path, arr.reshape(height, width, channel_count), quality)
    except EncodeError:
        raise
    except (OSError, ValueError) as e:
        raise EncodeError(f'Error saving image file {path}: {e}') from e
    logger.debug('encoded %s: %dx%d, %d channel(s)', path, width, height, channel_count)
