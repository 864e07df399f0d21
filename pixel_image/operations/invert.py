"""Invert the colour channels of an image; alpha is kept as is.

Integer samples are mirrored within [0, max] of the representation
(255 - v for 8-bit). Floating samples are treated as the [0, 1] range.
Hue channels wrap modulo 360 like any other arithmetic result.
The result is written with --output.

Example:
    pixel-image invert photo.jpg -o inverted.jpg
"""

import numpy as np

from pixel_image.core import arithmetic
from pixel_image.core.image import Image
from pixel_image.core.numeric import limits
from pixel_image.core.types import Operation, Report

operation = Operation(
    name='invert',
    help='Invert colour channels (peak - value); alpha is preserved.',
)


def peak_value(sample: np.dtype) -> int | float:
    """The value that maps to 0 when inverted."""
    if sample.kind == 'f':
        return 1.0
    return limits(sample)[1]


def invert(image: Image) -> Image:
    content = arithmetic.invert(image.fmt, image.sample, image.to_array(), peak_value(image.sample))
    return Image.from_array(image.fmt, content, image.sample)


@operation.run
def run(image: Image, report: Report, args) -> Image:
    report.add('invert', {'peak': peak_value(image.sample)})
    return invert(image)
