"""Blend the image with --other: image * weight + other * (1 - weight).

Both images are loaded with the same --format/--sample and must have the
same dimensions. --weight is clamped to [0, 1] (NaN counts as 0). Each
term is truncated before the two are added.

Example:
    pixel-image blend a.png --other b.png --weight 0.25 -o mix.png
"""

from pixel_image.core.arithmetic import blend_weight
from pixel_image.core.image import Image
from pixel_image.core.types import Operation, Report

operation = Operation(
    name='blend',
    help='Blend with --other image by --weight (0..1).',
    needs_other=True,
)


@operation.run
def run(image: Image, report: Report, args) -> Image:
    weight = blend_weight(args.weight)
    report.add('blend', {'other': args.other, 'weight': weight})
    return image.blend(args.other_image, weight)
