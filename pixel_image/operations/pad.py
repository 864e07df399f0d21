"""Grow the image by --pad pixels on every side using border extrapolation.

--border picks the policy (default from PIXEL_IMAGE_BORDER):
  constant   fill with --border-value (grey level in every colour channel,
             opaque alpha); 0 when omitted
  replicate  repeat the nearest edge pixel
  reflect    mirror about the edge without repeating it (dcb|abcd|cba)

Reflection happens once per axis; padding wider than the image falls back to
the default pixel beyond the mirrored range.

Example:
    pixel-image pad photo.png --pad 16 --border reflect -o padded.png
"""

import numpy as np

from pixel_image.core.image import BorderMode, BorderType, Image, border_indices
from pixel_image.core.pixel import Pixel
from pixel_image.core.types import Operation, Report

operation = Operation(
    name='pad',
    help='Extend by --pad pixels per side with constant/replicate/reflect borders.',
)


def pad(image: Image, amount: int, border: BorderMode) -> Image:
    """Same pixels as get_pixel(x - amount, y - amount, border) over the grown grid."""
    fill = border.border_pixel if border.kind is BorderType.CONSTANT else None
    out = Image(image.fmt, image.sample)
    out.create(image.width + 2 * amount, image.height + 2 * amount, fill=fill)

    src_y = border_indices(np.arange(-amount, image.height + amount), image.height, border.kind)
    src_x = border_indices(np.arange(-amount, image.width + amount), image.width, border.kind)
    inside_y = (src_y >= 0) & (src_y < image.height)
    inside_x = (src_x >= 0) & (src_x < image.width)
    if not (inside_y.any() and inside_x.any()):
        return out

    content = out.to_array()
    rows = np.flatnonzero(inside_y)
    cols = np.flatnonzero(inside_x)
    content[np.ix_(rows, cols)] = image.to_array()[np.ix_(src_y[rows], src_x[cols])]
    return Image.from_array(image.fmt, content, image.sample)


@operation.run
def run(image: Image, report: Report, args) -> Image:
    amount = max(args.pad, 0)
    kind = BorderType(args.border) if args.border else args.settings.border
    fill = None
    if kind is BorderType.CONSTANT:
        fill = Pixel(image.fmt, args.border_value or 0, sample=image.sample)
    report.add('pad', {'pad': amount, 'border': kind.value})
    return pad(image, amount, BorderMode(kind=kind, border_pixel=fill))
