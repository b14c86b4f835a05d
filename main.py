import logging
import colorlog
import argparse
import json
import sys
from typing import Dict, List, Optional
import numpy as np
from arclength.config import PathConfig
from arclength.conversion import from_element, from_path_data
from arclength.curves import BezierPath

handler = colorlog.StreamHandler()
handler.setFormatter(colorlog.ColoredFormatter(
    '%(blue)s[%(asctime)s]%(reset)s %(log_color)s[%(levelname)s]%(reset)s %(purple)s[%(filename)s:%(lineno)d]%(reset)s: %(message)s',
    datefmt='%H:%M:%S',
    log_colors={
        'DEBUG': 'cyan',
        'INFO': 'green',
        'WARNING': 'yellow',
        'ERROR': 'red',
        'CRITICAL': 'red,bg_white',
    },
    style='%'
))

logger = logging.getLogger()
logger.setLevel(logging.INFO)
logger.handlers = [handler]


def _parse_attributes(pairs: Optional[List[str]]) -> Dict[str, str]:
    attributes = {}
    for pair in pairs or []:
        if '=' not in pair:
            raise ValueError(f"Attribute must look like name=value, got {pair!r}")
        key, value = pair.split('=', 1)
        attributes[key.strip()] = value.strip()
    return attributes

def build_path(path_data: Optional[str] = None, element: Optional[str] = None,
               attributes: Optional[List[str]] = None, sample_spacing: float = 2.0) -> BezierPath:
    config = PathConfig(sample_spacing=sample_spacing)
    if element:
        return from_element(element, _parse_attributes(attributes), config=config)
    if path_data is None:
        raise ValueError("Either --path-data or --element is required")
    return from_path_data(path_data, config=config)

def describe_path(path: BezierPath) -> dict:
    return {
        "length": path.get_total_length(),
        "segments": len(path.segments),
        "samples": len(path),
        "jumps": path.jumps(),
        "segment_ranges": [[r.start, r.end] for r in path.segment_ranges],
    }

def sample_path(path: BezierPath, count: int, approximate: bool = False) -> List[dict]:
    """Evenly spaced points by distance, including both ends"""
    if count < 2:
        raise ValueError(f"Sample count must be at least 2, got {count}")
    rows = []
    for length in np.linspace(0.0, path.get_total_length(), count):
        point = path.get_point_at_length(length, approximate)
        rows.append({
            "length": float(length),
            "x": float(point[0]),
            "y": float(point[1]),
            "angle": path.get_angle_at_length(length, approximate),
        })
    return rows

def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description='Arc-length queries over cubic Bézier paths')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    def add_source_args(sub):
        sub.add_argument('--path-data', help='SVG path data, e.g. "M 0 0 C 0 100 100 100 100 0"')
        sub.add_argument('--element', choices=['path', 'line', 'circle'], help='SVG element type to build from')
        sub.add_argument('--attr', action='append', metavar='NAME=VALUE', help='Element attribute, repeatable')
        sub.add_argument('--sample-spacing', type=float, default=2.0, help='Target distance between samples')

    info_parser = subparsers.add_parser('info', help='Show length, jumps and segment ranges of a path')
    add_source_args(info_parser)

    sample_parser = subparsers.add_parser('sample', help='Sample points evenly spaced by distance')
    add_source_args(sample_parser)
    sample_parser.add_argument('--count', type=int, default=10, help='Number of points to sample')
    sample_parser.add_argument('--approximate', action='store_true', help='Interpolate samples linearly')

    return parser.parse_args(argv)

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logger.setLevel(logging.DEBUG)

    if args.command not in ('info', 'sample'):
        logger.error("Please specify a command. Use --help for more information.")
        return 1

    try:
        path = build_path(args.path_data, args.element, args.attr, args.sample_spacing)
        if args.command == 'info':
            result = describe_path(path)
            logging.info(f"Path length {result['length']:.4f} over {result['segments']} segments")
        else:
            result = sample_path(path, args.count, args.approximate)
    except ValueError as e:
        logging.error(f"{e}")
        return 1

    print(json.dumps(result, indent=2))
    return 0

if __name__ == "__main__":
    sys.exit(main())
