import argparse
import logging
import sys
from .prelude import ContactSheetError, log
from .config import SheetConfig
from .sheet import generate


def build_parser():
    parser = argparse.ArgumentParser(
        prog='contactsheet', description='Render a grid of evenly spaced frames from a video.')
    parser.add_argument('--input', '-i', help='Input video file (required)')
    parser.add_argument(
        '--output', '-o', help='Output image, format chosen by extension (default: preview.png)')
    parser.add_argument('--rows', type=int, help='Number of grid rows (default: 3)')
    parser.add_argument('--cols', type=int, help='Number of grid columns (default: 3)')
    parser.add_argument('--cell-width', type=int, help='Width of each cell in pixels (default: 320)')
    parser.add_argument(
        '--cell-height',
        type=int,
        help='Height of each cell in pixels, 0 to follow the video aspect ratio (default: 0)')
    parser.add_argument(
        '--margin', type=int, help='Gap between cells and around the edge in pixels (default: 8)')
    parser.add_argument('--quality', type=int, help='JPEG quality 1-100 (default: 90)')
    parser.add_argument(
        '--background', help='Background color, #RRGGBB or #RRGGBBAA (default: #FFFFFF)')
    parser.add_argument(
        '--workers', type=int, help='Number of frames captured in parallel (default: 1)')
    parser.add_argument('--config', '-c', help='YAML file with any of the options above')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log debug output')
    parser.add_argument('--quiet', '-q', action='store_true', help='Hide the progress bar')
    return parser


def parse_config(argv=None):
    args = build_parser().parse_args(argv)

    options = {
        k: getattr(args, k)
        for k in [
            'input', 'output', 'rows', 'cols', 'cell_width', 'cell_height', 'margin', 'quality',
            'background', 'workers'
        ]
    }

    if args.config is not None:
        config = SheetConfig.from_yaml(args.config, **options)
    else:
        config = SheetConfig.from_dict({}, **options)

    return (config, args)


def main(argv=None):
    level = log.level
    try:
        (config, args) = parse_config(argv)
        if args.verbose:
            log.setLevel(logging.DEBUG)
        generate(config, progress=not args.quiet)
    except ContactSheetError as e:
        log.error('Error: {}'.format(e))
        return 1
    finally:
        log.setLevel(level)
    return 0


if __name__ == '__main__':
    sys.exit(main())
