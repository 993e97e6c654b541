"""paintcore: inspect raster images the way the editor imports them.

Usage: paintcore [--env-file PATH] <command> [options]

Commands:
  info <image>     Load an image (.ora, .gif or any Pillow format) and list
                   its layers. --pixel X,Y adds each layer's colour at that
                   canvas coordinate.
  color <value>    Show the pixel encodings of a colour given as #rrggbb,
                   #aarrggbb or hsv(h,s,v).

Environment variables / .env loading:
  OS environment variables are always used first.
  If a variable is not set, paintcore looks for a .env file starting from
  the current directory and walking up, stopping at the nearest .git boundary.
  Use --env-file to override the .env location explicitly.

  PAINTCORE_MAX_PIXELS   largest image (width * height) to import
  PAINTCORE_MAX_FRAMES   maximum GIF frames imported (default 1000)
"""

import argparse
import sys

from paintcore.core.color import Color, parse_color
from paintcore.core.env import ImportSettings, load_env
from paintcore.core.errors import ImageImportError
from paintcore.core.report import format_json, format_text
from paintcore.importer import load_image


def _parse_point(text: str) -> tuple[int, int]:
    try:
        x, y = (int(part) for part in text.split(','))
    except ValueError:
        raise argparse.ArgumentTypeError(f'expected X,Y, got {text!r}') from None
    return x, y


def _parse_color_arg(text: str) -> Color:
    try:
        return parse_color(text)
    except ValueError as err:
        raise argparse.ArgumentTypeError(str(err)) from None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='paintcore',
        description='Inspect raster images as layered canvases.',
        epilog=(
            'Examples:\n'
            '  paintcore info drawing.ora\n'
            '  paintcore info animation.gif --json\n'
            '  paintcore info photo.png --pixel 10,20\n'
            "  paintcore color '#80ff0000'\n"
            "  paintcore color 'hsv(120,1,0.5)'\n"
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        '--env-file',
        metavar='PATH',
        default=None,
        help='Path to .env file (default: walk up from cwd to .git boundary)',
    )
    sub = parser.add_subparsers(dest='command', help='Command to run')

    info = sub.add_parser('info', help='Load an image and list its layers')
    info.add_argument('image', help='Path to the image file')
    info.add_argument('-j', '--json', action='store_true', help='Output JSON instead of text')
    info.add_argument('-p', '--pixel', type=_parse_point, metavar='X,Y', help='Sample each layer at X,Y')

    color = sub.add_parser('color', help='Show the encodings of a colour')
    color.add_argument('value', type=_parse_color_arg, help='#rrggbb, #aarrggbb or hsv(h,s,v)')

    return parser


def _run_info(args: argparse.Namespace) -> int:
    try:
        settings = ImportSettings.from_env()
    except ValueError as err:
        print(f'Error: {err}', file=sys.stderr)
        return 1

    try:
        stack = load_image(args.image, settings)
    except ImageImportError as err:
        print(f'Error: {err.kind.value}: {err}', file=sys.stderr)
        return 1

    if args.json:
        print(format_json(stack, args.image, probe=args.pixel))
    else:
        print(format_text(stack, args.image, probe=args.pixel))
    return 0


def _run_color(args: argparse.Namespace) -> int:
    color: Color = args.value
    pixel = color.as_pixel()
    print(f'color:     {color!r}')
    print(f'argb32:    #{color.as_argb32():08x}')
    print(f'pixel:     bgra={list(pixel)}')
    print(f'shade:     {"transparent" if color.is_transparent() else ("dark" if color.is_dark() else "light")}')
    return 0


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Load .env before anything reads settings; OS env vars always win
    env_path = load_env(env_file=args.env_file)
    if env_path:
        print(f'paintcore: loaded {env_path}', file=sys.stderr)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == 'info':
        status = _run_info(args)
    else:
        status = _run_color(args)
    if status:
        sys.exit(status)


if __name__ == '__main__':
    main()
