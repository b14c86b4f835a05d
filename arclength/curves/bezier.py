import math
from typing import Optional, Sequence, Tuple, Union
import numpy as np
from arclength.config import DEFAULT_CONFIG, PathConfig

PointLike = Union[Tuple[float, float], Sequence[float], np.ndarray]

def as_point(point: PointLike) -> np.ndarray:
    """Copy an (x, y) pair into a read-only float64 array"""
    arr = np.array(point, dtype=np.float64).reshape(-1)
    if arr.shape != (2,):
        raise ValueError(f"Point must have exactly 2 coordinates, got {point!r}")
    arr.flags.writeable = False
    return arr

class BezierSegment:
    """A single cubic Bézier segment A, B, C, D.

    A segment with A == B and C == D is treated as the straight line A -> D;
    this is how straight path commands are encoded.
    """

    def __init__(self, a: PointLike, b: PointLike, c: PointLike, d: PointLike,
                 config: PathConfig = DEFAULT_CONFIG):
        self.a = as_point(a)
        self.b = as_point(b)
        self.c = as_point(c)
        self.d = as_point(d)
        self.config = config

        self.points = np.stack([self.a, self.b, self.c, self.d])
        self.points.flags.writeable = False

        diffs = np.diff(self.points, axis=0)
        self.control_length = float(np.sum(np.sqrt(np.sum(diffs**2, axis=1))))
        self._total_length: Optional[float] = None

    @classmethod
    def from_points(cls, points: Sequence[PointLike], config: PathConfig = DEFAULT_CONFIG) -> 'BezierSegment':
        """Create a segment from a sequence of exactly four (x, y) pairs"""
        if len(points) != 4:
            raise ValueError(f"A cubic segment needs 4 control points, got {len(points)}")
        return cls(*points, config=config)

    def with_config(self, config: PathConfig) -> 'BezierSegment':
        """Same control points evaluated with another config"""
        return BezierSegment(self.a, self.b, self.c, self.d, config=config)

    @property
    def start_point(self) -> np.ndarray:
        return self.a

    @property
    def end_point(self) -> np.ndarray:
        return self.d

    def is_linear(self) -> bool:
        return np.array_equal(self.a, self.b) and np.array_equal(self.c, self.d)

    def point_at_parameter(self, t: float) -> np.ndarray:
        """Calculate point on the curve at parameter t (clamped to [0, 1])"""
        t = min(1.0, max(0.0, float(t)))
        mt = 1.0 - t
        return (mt**3) * self.a + 3 * (mt**2) * t * self.b + 3 * mt * (t**2) * self.c + (t**3) * self.d

    def points_at_parameters(self, ts: np.ndarray) -> np.ndarray:
        """Vectorised point_at_parameter, returns an (N, 2) array"""
        t = np.clip(np.asarray(ts, dtype=np.float64), 0.0, 1.0)[:, None]
        mt = 1.0 - t
        return (mt**3) * self.a + 3 * (mt**2) * t * self.b + 3 * mt * (t**2) * self.c + (t**3) * self.d

    def tangent_at_parameter(self, t: float) -> np.ndarray:
        """Unit tangent at parameter t (clamped to [0, 1]).

        At the end points the direction to the first distinct neighbouring
        control point is used, since the derivative vanishes when the adjacent
        handle sits on the end point. Near-zero derivatives are returned
        unnormalized.
        """
        t = min(1.0, max(0.0, float(t)))
        if t == 0.0:
            vec = self._start_direction()
        elif t == 1.0:
            vec = self._end_direction()
        else:
            vec = self._derivative(t)
        return self._normalize(vec)

    def tangents_at_parameters(self, ts: np.ndarray) -> np.ndarray:
        """Vectorised tangent_at_parameter, returns an (N, 2) array"""
        t = np.clip(np.asarray(ts, dtype=np.float64), 0.0, 1.0)[:, None]
        mt = 1.0 - t
        vecs = 3 * (mt**2) * (self.b - self.a) + 6 * mt * t * (self.c - self.b) + 3 * (t**2) * (self.d - self.c)
        vecs[t[:, 0] == 0.0] = self._start_direction()
        vecs[t[:, 0] == 1.0] = self._end_direction()

        norms = np.sqrt(np.sum(vecs**2, axis=1))
        mask = norms > self.config.tangent_epsilon
        vecs[mask] /= norms[mask][:, None]
        return vecs

    def get_total_length(self) -> float:
        """Arc length of the segment, exact for linear segments and a polyline estimate otherwise"""
        if self._total_length is None:
            if self.is_linear():
                self._total_length = math.hypot(*(self.d - self.a))
            else:
                self._total_length = self._calculate_length()
        return self._total_length

    def _calculate_length(self) -> float:
        sections = self.config.length_sample_count(self.control_length)
        points = self.points_at_parameters(np.linspace(0.0, 1.0, sections))
        diffs = np.diff(points, axis=0)
        return float(np.sum(np.sqrt(np.sum(diffs**2, axis=1))))

    def _derivative(self, t: float) -> np.ndarray:
        mt = 1.0 - t
        return 3 * (mt**2) * (self.b - self.a) + 6 * mt * t * (self.c - self.b) + 3 * (t**2) * (self.d - self.c)

    def _start_direction(self) -> np.ndarray:
        if np.array_equal(self.a, self.b):
            return self.c - self.a
        return self.b - self.a

    def _end_direction(self) -> np.ndarray:
        if np.array_equal(self.d, self.c):
            return self.d - self.b
        return self.d - self.c

    def _normalize(self, vec: np.ndarray) -> np.ndarray:
        length = math.hypot(vec[0], vec[1])
        if length > self.config.tangent_epsilon:
            return vec / length
        return vec

    def __repr__(self) -> str:
        return (f"BezierSegment(a={tuple(self.a)}, b={tuple(self.b)}, "
                f"c={tuple(self.c)}, d={tuple(self.d)})")
