from .bezier import BezierSegment, as_point
from .path import BezierPath, Sample, SegmentRange

__all__ = [
    'BezierSegment',
    'BezierPath',
    'Sample',
    'SegmentRange',
    'as_point'
]
