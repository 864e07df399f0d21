"""Error taxonomy for pixel-image.

Arithmetic and addressing never raise: they clamp or degrade to a default
pixel. Only allocation shape, strict access and codec operations fail.
"""


class PixelImageError(Exception):
    """Base class for every error raised by pixel_image."""


class UnsupportedSampleType(PixelImageError, TypeError):
    """A Pixel or Image was requested with a sample dtype outside the supported set."""


class InvalidDimensions(PixelImageError, ValueError):
    """Negative width/height/stride, or a stride narrower than the width."""


class DimensionMismatch(PixelImageError, ValueError):
    """Two images that must share width/height do not."""


class IncompatibleChannelLayout(PixelImageError, ValueError):
    """Channel layout (or decoded channel count) does not fit the target image."""


class OutOfRangeAccess(PixelImageError, IndexError):
    """Raised by the strict accessors only. The default accessors never raise."""


class DecodeError(PixelImageError, OSError):
    """The codec could not read the file."""


class EncodeError(PixelImageError, OSError):
    """The codec could not write the file."""
