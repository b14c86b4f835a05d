"""Builds BezierPath objects from path commands, SVG path data and simple shapes.

Every straight piece is encoded as a degenerate cubic (A == B, C == D) and
quadratics are elevated to cubics, so the path engine only sees cubic segments.
"""
import logging
from typing import Mapping, NamedTuple, Optional, Sequence
from arclength.config import DEFAULT_CONFIG, PathConfig
from arclength.curves import BezierPath, BezierSegment
from arclength.curves.bezier import PointLike
from arclength.parser.path_parser import CommandType, DrawingCommand, parse_path_data

# Handle length factor for the two-segment circle approximation
CIRCLE_HANDLE_FACTOR = 1.3

SUPPORTED_COMMANDS = (
    CommandType.MOVE,
    CommandType.LINE,
    CommandType.HORIZONTAL,
    CommandType.VERTICAL,
    CommandType.CUBIC,
    CommandType.QUADRATIC,
    CommandType.CLOSE,
)

class PathConversionError(ValueError):
    """Base class for errors raised while translating input into segments"""

class PathStructureError(PathConversionError):
    """The input does not describe a usable path (too short, no leading move, nothing drawn)"""

class UnsupportedCommandError(PathConversionError):
    """The input uses a command or element type the converter does not handle"""

class ControlPoint(NamedTuple):
    """An on-curve point with optional incoming (left) and outgoing (right) handles"""
    pt: PointLike
    left: Optional[PointLike] = None
    right: Optional[PointLike] = None

def _line(start, end, config: PathConfig) -> BezierSegment:
    return BezierSegment(start, start, end, end, config=config)

def from_commands(commands: Sequence[DrawingCommand], config: PathConfig = DEFAULT_CONFIG) -> BezierPath:
    """Create a path from absolute drawing commands (M, L, H, V, C, Q, Z)"""
    if len(commands) < 2:
        raise PathStructureError(f"Path doesn't have enough commands: {list(commands)}")
    if commands[0].type is not CommandType.MOVE:
        raise PathStructureError(f"Path starts with {commands[0].type.value} instead of M")

    first_point = commands[0].args
    last_point = first_point
    segments = []

    for command in commands:
        kind, args = command.type, command.args
        if kind not in SUPPORTED_COMMANDS:
            raise UnsupportedCommandError(
                f"Unsupported path command {kind.value}; use only M, L, H, V, C, Q, Z"
            )

        if kind is CommandType.MOVE:
            first_point = args
            last_point = first_point
        elif kind is CommandType.CUBIC:
            segments.append(BezierSegment(last_point, args[0:2], args[2:4], args[4:6], config=config))
            last_point = args[4:6]
        elif kind is CommandType.QUADRATIC:
            (x0, y0), (x1, y1), (x, y) = last_point, args[0:2], args[2:4]
            segments.append(BezierSegment(
                last_point,
                (x0 + 2 / 3 * (x1 - x0), y0 + 2 / 3 * (y1 - y0)),
                (x + 2 / 3 * (x1 - x), y + 2 / 3 * (y1 - y)),
                (x, y),
                config=config
            ))
            last_point = (x, y)
        elif kind is CommandType.CLOSE:
            if tuple(last_point) != tuple(first_point):
                segments.append(_line(last_point, first_point, config))
            last_point = first_point
        else:
            if kind is CommandType.LINE:
                target = args
            elif kind is CommandType.HORIZONTAL:
                target = (args[0], last_point[1])
            else:
                target = (last_point[0], args[0])

            if tuple(target) != tuple(last_point):
                segments.append(_line(last_point, target, config))
            else:
                logging.debug(f"Skipping zero-length {kind.value} command at {tuple(target)}")
            last_point = target

    if not segments:
        raise PathStructureError(f"Path doesn't draw anything: {list(commands)}")
    return BezierPath(segments, config=config)

def from_path_data(d: str, config: PathConfig = DEFAULT_CONFIG) -> BezierPath:
    """Create a path from an SVG path `d` attribute"""
    return from_commands(parse_path_data(d), config=config)

def from_control_points(points: Sequence[ControlPoint], config: PathConfig = DEFAULT_CONFIG) -> BezierPath:
    """Create a path through on-curve points, missing handles collapse onto their point"""
    if len(points) < 2:
        raise PathStructureError(f"Path needs at least 2 control points, got {len(points)}")
    segments = []
    for prev, curr in zip(points, points[1:]):
        segments.append(BezierSegment(
            prev.pt,
            prev.right if prev.right is not None else prev.pt,
            curr.left if curr.left is not None else curr.pt,
            curr.pt,
            config=config
        ))
    return BezierPath(segments, config=config)

def from_line(x1: float, y1: float, x2: float, y2: float, config: PathConfig = DEFAULT_CONFIG) -> BezierPath:
    return BezierPath([_line((x1, y1), (x2, y2), config)], config=config)

def from_circle(cx: float, cy: float, r: float, config: PathConfig = DEFAULT_CONFIG) -> BezierPath:
    """Approximate a circle with two symmetric cubics, starting at its leftmost point"""
    k = CIRCLE_HANDLE_FACTOR
    return BezierPath([
        BezierSegment((cx - r, cy), (cx - r, cy - k * r), (cx + r, cy - k * r), (cx + r, cy), config=config),
        BezierSegment((cx + r, cy), (cx + r, cy + k * r), (cx - r, cy + k * r), (cx - r, cy), config=config),
    ], config=config)

def _float_attribute(attributes: Mapping[str, str], name: str) -> float:
    return float(attributes.get(name) or '0')

def from_element(tag: str, attributes: Mapping[str, str], config: PathConfig = DEFAULT_CONFIG) -> BezierPath:
    """Create a path from an SVG element given its tag name and attribute mapping"""
    tag = tag.lower()
    if tag == 'path':
        return from_path_data(attributes.get('d') or '', config=config)
    if tag == 'line':
        x1, y1, x2, y2 = (_float_attribute(attributes, name) for name in ('x1', 'y1', 'x2', 'y2'))
        return from_line(x1, y1, x2, y2, config=config)
    if tag == 'circle':
        cx, cy, r = (_float_attribute(attributes, name) for name in ('cx', 'cy', 'r'))
        return from_circle(cx, cy, r, config=config)
    raise UnsupportedCommandError(f"Unsupported SVG tag: {tag}")
