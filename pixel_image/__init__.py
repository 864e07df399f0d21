"""pixel_image — strided, multi-format pixel buffers with overflow-safe arithmetic."""

from pixel_image.core.channels import LAYOUTS, ImageFormat, Layout, apply_to_channels
from pixel_image.core.codecs import DecodedImage, decode, encode
from pixel_image.core.errors import (
    DecodeError,
    DimensionMismatch,
    EncodeError,
    IncompatibleChannelLayout,
    InvalidDimensions,
    OutOfRangeAccess,
    PixelImageError,
    UnsupportedSampleType,
)
from pixel_image.core.image import BorderMode, BorderType, Image, ImageState
from pixel_image.core.imageio import load_from_file, save_to_file
from pixel_image.core.numeric import SAMPLE_TYPES, clamp_cast, promote
from pixel_image.core.pixel import Pixel, abs_diff, blend_colors, l2_norm, multiply

__version__ = '0.1.0'

__all__ = [
    'LAYOUTS',
    'SAMPLE_TYPES',
    'BorderMode',
    'BorderType',
    'DecodeError',
    'DecodedImage',
    'DimensionMismatch',
    'EncodeError',
    'Image',
    'ImageFormat',
    'ImageState',
    'IncompatibleChannelLayout',
    'InvalidDimensions',
    'Layout',
    'OutOfRangeAccess',
    'Pixel',
    'PixelImageError',
    'UnsupportedSampleType',
    'abs_diff',
    'apply_to_channels',
    'blend_colors',
    'clamp_cast',
    'decode',
    'encode',
    'l2_norm',
    'load_from_file',
    'multiply',
    'promote',
    'save_to_file',
]
