"""Report builder — text and JSON output for pixel-image results."""

import json
from typing import Any

from pixel_image.core.types import Report


def _fmt_value(value: Any) -> str:
    if isinstance(value, float):
        return f'{value:.3f}'
    if isinstance(value, dict):
        return ', '.join(f'{k}={_fmt_value(v)}' for k, v in value.items())
    if isinstance(value, list):
        return '[' + ', '.join(_fmt_value(v) for v in value) + ']'
    return str(value)


def format_text(report: Report) -> str:
    """Format report as human-readable text."""
    dim = f'{report.width}×{report.height}'
    lines = [f'pixel-image: {report.image_path} ({dim}, {report.image_format}/{report.sample})', '']

    for op_name, data in report.results.items():
        lines.append(f'── {op_name}')
        if op_name == 'info' and 'channels' in data:
            for ch in data['channels']:
                lines.append(f'  {ch["name"]}: min={ch["min"]} max={ch["max"]} mean={ch["mean"]:.2f}')
            rest = {k: v for k, v in data.items() if k != 'channels'}
        else:
            rest = data
        for key, value in rest.items():
            lines.append(f'  {key}: {_fmt_value(value)}')
        lines.append('')

    if report.output_path:
        lines.append(f'wrote {report.output_path}')
    return '\n'.join(lines).rstrip('\n')


def format_json(report: Report) -> str:
    """Format report as JSON."""
    obj: dict[str, Any] = {
        'image': report.image_path,
        'format': report.image_format,
        'sample': report.sample,
        'dimensions': {'width': report.width, 'height': report.height},
        'operations': report.results,
    }
    if report.output_path:
        obj['output'] = report.output_path
    return json.dumps(obj, indent=2)
