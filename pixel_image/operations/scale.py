"""Multiply every channel (alpha included) by --factor, saturating.

Example:
    pixel-image scale photo.png --factor 1.5 -o brighter.png
"""

from pixel_image.core.image import Image
from pixel_image.core.types import Operation, Report

operation = Operation(
    name='scale',
    help='Multiply every channel by --factor, clamped to the sample range.',
)


@operation.run
def run(image: Image, report: Report, args) -> Image:
    factor = args.factor
    report.add('scale', {'factor': factor})
    return image * factor
