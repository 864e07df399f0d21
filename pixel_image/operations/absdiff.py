"""Per-pixel absolute difference against --other, with distance stats.

Writes |image - other| per channel (alpha included) to --output and reports
the mean and max colour-channel Euclidean distance, plus how many pixels
differ at all.

Example:
    pixel-image absdiff current.png --other reference.png -o diff.png --json
"""

import numpy as np

from pixel_image.core.image import Image
from pixel_image.core.types import Operation, Report

operation = Operation(
    name='absdiff',
    help='Absolute difference with --other; reports mean/max L2 distance.',
    needs_other=True,
)


@operation.run
def run(image: Image, report: Report, args) -> Image:
    other = args.other_image
    distances = image.l2_distance(other)
    changed = int(np.count_nonzero(distances))
    report.add(
        'absdiff',
        {
            'other': args.other,
            'mean_l2': round(float(distances.mean()), 3) if distances.size else 0.0,
            'max_l2': round(float(distances.max()), 3) if distances.size else 0.0,
            'changed_pixels': changed,
            'changed_pct': round(changed / max(distances.size, 1) * 100, 1),
        },
    )
    return image.abs_diff(other)
