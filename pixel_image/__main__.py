"""pixel-image — inspect and transform images through the pixel buffer library.

Usage: pixel-image <operation> <image> [options]

Operations are auto-discovered from pixel_image/operations/.
Each operation module's docstring is its documentation.
Run `pixel-image help <operation>` for full module docs.

Environment variables / .env loading:
  OS environment variables are always used first.
  If a variable is not set, pixel-image looks for a .env file starting from
  the current directory and walking up, stopping at the nearest .git boundary.
  Use --env-file to override the .env location explicitly.
"""

import argparse
import importlib
import logging
import os
import sys

from pixel_image import registry
from pixel_image.core.channels import ImageFormat
from pixel_image.core.env import Settings, load_env
from pixel_image.core.errors import PixelImageError
from pixel_image.core.image import BorderType, Image
from pixel_image.core.numeric import SAMPLE_TYPES
from pixel_image.core.report import format_json, format_text
from pixel_image.core.types import Report


def _load_operation_module(name: str) -> object:
    """Load the raw module for an operation (for docstring access)."""
    return importlib.import_module(f'pixel_image.operations.{name}')


def _short_doc(name: str, fallback: str) -> str:
    doc = (_load_operation_module(name).__doc__ or '').strip()
    return doc.splitlines()[0] if doc else fallback


def _build_parser() -> argparse.ArgumentParser:
    operations = registry.all_operations()

    epilog = (
        'Examples:\n'
        '  pixel-image info photo.png\n'
        '  pixel-image invert photo.jpg -o inverted.jpg\n'
        '  pixel-image blend a.png --other b.png --weight 0.25 -o mix.png\n'
        '  pixel-image absdiff current.png --other ref.png -o diff.png --json\n'
        '  pixel-image pad photo.png --pad 8 --border reflect -o padded.png\n'
        '  pixel-image info scan.pgm --format gray --sample uint16\n'
        '  pixel-image help pad\n'
        '\n'
        'Settings (set in .env or environment):\n'
        '  PIXEL_IMAGE_QUALITY    JPEG quality 1-100 (default 100)\n'
        '  PIXEL_IMAGE_BORDER     default --border for pad\n'
        '  PIXEL_IMAGE_LOG_LEVEL  DEBUG, INFO, WARNING (default), ...\n'
    )
    parser = argparse.ArgumentParser(
        prog='pixel-image',
        description='Inspect and transform images pixel by pixel.',
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        '--env-file',
        metavar='PATH',
        default=None,
        help='Path to .env file (default: walk up from cwd to .git boundary)',
    )
    sub = parser.add_subparsers(dest='operation', help='Operation to run')

    formats = [f.value for f in ImageFormat]
    samples = [s.name for s in SAMPLE_TYPES]
    borders = [b.value for b in BorderType]

    for name, op in sorted(operations.items()):
        p = sub.add_parser(name, help=_short_doc(name, op.help))
        p.add_argument('image', help='Input image (png, jpg, bmp, pgm, ...)')
        p.add_argument('-o', '--output', help='Where to write the result image')
        p.add_argument('-f', '--format', default='rgb', choices=formats, help='Channel layout (default: rgb)')
        p.add_argument('-s', '--sample', default='uint8', choices=samples, help='Sample type (default: uint8)')
        p.add_argument('-j', '--json', action='store_true', help='Output JSON instead of text')
        p.add_argument('-q', '--quality', type=int, default=None, help='JPEG quality (default: PIXEL_IMAGE_QUALITY)')
        p.add_argument('--no-alpha', action='store_true', help='Do not write the alpha channel')
        p.add_argument('--other', help='Second image for blend/absdiff')
        p.add_argument('-w', '--weight', type=float, default=0.5, help='Blend weight of the first image (0..1)')
        p.add_argument('--factor', type=float, default=1.0, help='Scale factor')
        p.add_argument('--pad', type=int, default=1, help='Border width in pixels for pad')
        p.add_argument('-b', '--border', choices=borders, default=None, help='Border policy for pad')
        p.add_argument('--border-value', type=float, default=None, help='Constant border grey level')
        p.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    help_parser = sub.add_parser('help', help='Print full docs for an operation')
    help_parser.add_argument('command', nargs='?', help='Operation name')

    return parser


def _print_help(command: str | None) -> None:
    """Print full module docstring for an operation."""
    operations = registry.all_operations()

    if command is None:
        print('Available operations:\n')
        for name, op in sorted(operations.items()):
            print(f'  {name:<10} {_short_doc(name, op.help)}')
        print('\nRun: pixel-image help <operation> for full docs.')
        return

    if command not in operations:
        print(f'Unknown operation: {command}', file=sys.stderr)
        print(f'Available: {", ".join(sorted(operations))}', file=sys.stderr)
        sys.exit(1)

    doc = (_load_operation_module(command).__doc__ or '').strip()
    if not doc:
        print(f'(No module docs for {command!r})')
        return
    print(doc)


def _load_image(path: str, args: argparse.Namespace) -> Image:
    if not os.path.isfile(path):
        print(f'Error: image not found: {path}', file=sys.stderr)
        sys.exit(1)
    image = Image(args.format, args.sample)
    image.load_from_file(path)
    return image


def _write_result(result: Image, source: Image, args: argparse.Namespace, report: Report) -> None:
    # keep alpha only if the input had it, unless --no-alpha says otherwise
    alpha = not args.no_alpha and source.source_channels in (None, 2, 4)
    quality = args.quality if args.quality is not None else args.settings.quality
    result.save_to_file(args.output, alpha=alpha, quality=quality)
    report.output_path = args.output


def run(args: argparse.Namespace) -> Report:
    """Load inputs, run the operation, write the output; returns the report."""
    op = registry.get(args.operation)
    image = _load_image(args.image, args)

    args.other_image = None
    if op.needs_other:
        if not args.other:
            print(f'Error: {op.name} requires --other', file=sys.stderr)
            sys.exit(1)
        args.other_image = _load_image(args.other, args)

    report = Report.for_image(args.image, image)
    result = op.execute(image, report, args)

    if result is not None and args.output:
        _write_result(result, image, args, report)
    return report


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Load .env before anything else; OS env vars always win
    env_path = load_env(env_file=getattr(args, 'env_file', None))
    if env_path:
        print(f'pixel-image: loaded {env_path}', file=sys.stderr)

    if not args.operation:
        parser.print_help()
        sys.exit(1)

    if args.operation == 'help':
        _print_help(getattr(args, 'command', None))
        return

    try:
        args.settings = Settings.from_env()
    except ValueError as e:
        print(f'Error: {e}', file=sys.stderr)
        sys.exit(1)

    level = logging.DEBUG if args.verbose else args.settings.log_level
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')

    try:
        report = run(args)
    except PixelImageError as e:
        print(f'Error: {e}', file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(format_json(report))
    else:
        print(format_text(report))


if __name__ == '__main__':
    main()
