import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

class PathDataError(ValueError):
    """Raised when an SVG path data string cannot be tokenized or parsed"""

class CommandType(Enum):
    MOVE = "M"
    LINE = "L"
    HORIZONTAL = "H"
    VERTICAL = "V"
    CUBIC = "C"
    SMOOTH_CUBIC = "S"
    QUADRATIC = "Q"
    SMOOTH_QUADRATIC = "T"
    ARC = "A"
    CLOSE = "Z"

ARG_COUNTS = {
    CommandType.MOVE: 2,
    CommandType.LINE: 2,
    CommandType.HORIZONTAL: 1,
    CommandType.VERTICAL: 1,
    CommandType.CUBIC: 6,
    CommandType.SMOOTH_CUBIC: 4,
    CommandType.QUADRATIC: 4,
    CommandType.SMOOTH_QUADRATIC: 2,
    CommandType.ARC: 7,
    CommandType.CLOSE: 0,
}

TOKEN_PATTERN = re.compile(
    r'(?P<command>[MmZzLlHhVvCcSsQqTtAa])'
    r'|(?P<number>[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)'
    r'|(?P<separator>[\s,]+)'
    r'|(?P<invalid>.)'
)

@dataclass(frozen=True)
class DrawingCommand:
    """One absolute drawing command.

    args follow SVG order: M/L/T (x, y), H (x,), V (y,), C (x1, y1, x2, y2, x, y),
    S/Q (x1, y1, x, y), A (rx, ry, rotation, large_arc, sweep, x, y), Z ().
    """
    type: CommandType
    args: Tuple[float, ...] = ()

    def __post_init__(self):
        expected = ARG_COUNTS[self.type]
        if len(self.args) != expected:
            raise PathDataError(f"Command {self.type.value} expects {expected} arguments, got {len(self.args)}")

    def __repr__(self) -> str:
        return f"DrawingCommand({self.type.value}, {list(self.args)})"

def tokenize(d: str) -> List[Tuple[str, object]]:
    """Split path data into ('command', letter) and ('number', float) tokens"""
    tokens = []
    for match in TOKEN_PATTERN.finditer(d):
        kind = match.lastgroup
        if kind == 'separator':
            continue
        if kind == 'invalid':
            raise PathDataError(f"Unexpected character {match.group()!r} at position {match.start()}")
        if kind == 'command':
            tokens.append((kind, match.group()))
        else:
            tokens.append((kind, float(match.group())))
    return tokens

def _to_absolute(letter: str, args: List[float], current: Tuple[float, float],
                 start: Tuple[float, float]):
    """Resolve one command against the current point; returns (command, current, subpath start)"""
    relative = letter.islower()
    kind = CommandType(letter.upper())
    cx, cy = current

    if kind is CommandType.CLOSE:
        return DrawingCommand(kind), start, start
    if kind is CommandType.HORIZONTAL:
        x = args[0] + cx if relative else args[0]
        return DrawingCommand(kind, (x,)), (x, cy), start
    if kind is CommandType.VERTICAL:
        y = args[0] + cy if relative else args[0]
        return DrawingCommand(kind, (y,)), (cx, y), start
    if kind is CommandType.ARC:
        x, y = args[5], args[6]
        if relative:
            x, y = x + cx, y + cy
        return DrawingCommand(kind, tuple(args[:5]) + (x, y)), (x, y), start

    coords = list(args)
    if relative:
        for i in range(0, len(coords), 2):
            coords[i] += cx
            coords[i + 1] += cy
    end = (coords[-2], coords[-1])
    if kind is CommandType.MOVE:
        start = end
    return DrawingCommand(kind, tuple(coords)), end, start

def parse_path_data(d: str) -> List[DrawingCommand]:
    """Parse an SVG path `d` attribute into absolute drawing commands.

    Numbers following a command without a new letter repeat that command,
    except after a move where they continue as line-to.
    """
    tokens = tokenize(d)
    commands = []
    current = (0.0, 0.0)
    start = (0.0, 0.0)
    letter = None

    i = 0
    while i < len(tokens):
        kind, value = tokens[i]
        if kind == 'command':
            letter = value
            i += 1
        elif letter is None:
            raise PathDataError(f"Path data must start with a command, got {value}")
        elif letter in 'Zz':
            raise PathDataError(f"Unexpected number {value} after {letter}")

        count = ARG_COUNTS[CommandType(letter.upper())]
        args = []
        for _ in range(count):
            if i >= len(tokens) or tokens[i][0] != 'number':
                raise PathDataError(f"Command {letter} expects {count} arguments, got {len(args)}")
            args.append(tokens[i][1])
            i += 1

        command, current, start = _to_absolute(letter, args, current, start)
        commands.append(command)

        if letter == 'M':
            letter = 'L'
        elif letter == 'm':
            letter = 'l'

    return commands
