"""Describe an image: dimensions, stride, channel counts and per-channel stats.

Reports min, max and mean for every in-memory channel (alpha included), plus
the channel count the file was decoded with.

Example:
    pixel-image info photo.png
    pixel-image info photo.png --format gray --json
"""

import numpy as np

from pixel_image.core.image import Image
from pixel_image.core.types import Operation, Report

operation = Operation(
    name='info',
    help='Dimensions, channel counts and per-channel min/max/mean.',
)


@operation.run
def run(image: Image, report: Report, args) -> None:
    content = image.to_array()
    channels = []
    for i, name in enumerate(image.layout.channels):
        values = content[..., i]
        if values.size == 0:
            channels.append({'name': name, 'min': 0, 'max': 0, 'mean': 0.0})
            continue
        channels.append(
            {
                'name': name,
                'min': values.min().item(),
                'max': values.max().item(),
                'mean': round(float(np.mean(values, dtype=np.float64)), 3),
            }
        )

    report.add(
        'info',
        {
            'stride': image.stride,
            'channel_count': image.channel_count,
            'source_channels': image.source_channels,
            'channels': channels,
        },
    )
    return None
