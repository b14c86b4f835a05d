import bisect
import logging
import math
from typing import List, NamedTuple, Sequence, Tuple
import numpy as np
from arclength.config import DEFAULT_CONFIG, PathConfig
from .bezier import BezierSegment

class Sample(NamedTuple):
    """One entry of the distance lookup table"""
    distance: float
    point: np.ndarray
    tangent: np.ndarray
    segment_index: int
    t: float

class SegmentRange(NamedTuple):
    start: float
    end: float

class BezierPath:
    """Sequence of cubic segments queryable by arc length.

    On construction every segment is resampled so that consecutive samples are
    close to evenly spaced in distance. Queries binary search that table and
    refine the answer by re-evaluating the owning segment. Where one segment
    does not start where the previous one ended, two boundary samples are
    inserted around the midpoint so lookups snap to one side of the gap.
    """

    def __init__(self, segments: Sequence[BezierSegment], config: PathConfig = DEFAULT_CONFIG):
        if len(segments) == 0:
            raise ValueError("A path needs at least one segment")
        self.config = config
        # Length estimation and resampling must share one sample spacing
        self.segments: Tuple[BezierSegment, ...] = tuple(
            segment if segment.config == config else segment.with_config(config)
            for segment in segments
        )

        lengths = np.array([segment.get_total_length() for segment in self.segments])
        self.segment_offsets = np.zeros(len(lengths))
        self.segment_offsets[1:] = np.cumsum(lengths)[:-1]
        self.segment_offsets.flags.writeable = False
        self.length = float(self.segment_offsets[-1] + lengths[-1])

        sample_counts = [config.segment_sample_count(length) for length in lengths]
        num_samples = sum(sample_counts)
        avg_dist = self.length / num_samples
        step_size = 1.0 / (num_samples * config.step_scale)

        first = self.segments[0]
        samples = [Sample(0.0, first.a, first.tangent_at_parameter(0.0), 0, 0.0)]
        for index, segment in enumerate(self.segments):
            samples.extend(self._sample_segment(
                index, segment, float(self.segment_offsets[index]), float(lengths[index]),
                sample_counts[index], avg_dist, step_size
            ))

        samples, self._jumps = self._insert_jumps(samples)
        self.samples: Tuple[Sample, ...] = tuple(samples)
        self.segment_ranges: Tuple[SegmentRange, ...] = self._build_ranges(self.samples)

        self.distances = np.array([sample.distance for sample in self.samples])
        self.points = np.array([sample.point for sample in self.samples])
        self.tangents = np.array([sample.tangent for sample in self.samples])
        self.segment_indices = np.array([sample.segment_index for sample in self.samples], dtype=np.int64)
        self.parameters = np.array([sample.t for sample in self.samples])
        for arr in (self.distances, self.points, self.tangents, self.segment_indices, self.parameters):
            arr.flags.writeable = False

        logging.debug(f"Built path: {len(self.segments)} segments, {len(self.samples)} samples, "
                      f"{len(self._jumps)} jumps, length {self.length:.4f}")

    def _sample_segment(self, index: int, segment: BezierSegment, offset: float, length: float,
                        count: int, avg_dist: float, step_size: float) -> List[Sample]:
        """Relax count + 1 parameter values towards even spacing and emit all but the first.

        Sample distances are measured between the points of the final pass and
        rescaled so the segment ends exactly at offset + length. Distances taken
        before the last pass would differ slightly, and so would the jump
        midpoints derived from them.
        """
        ts = np.linspace(0.0, 1.0, count + 1)
        pts = segment.points_at_parameters(ts)

        for _ in range(self.config.refinement_passes):
            dists = np.sqrt(np.sum(np.diff(pts, axis=0)**2, axis=1))
            drift = np.cumsum(dists - avg_dist)[:-1]
            ts[1:-1] -= step_size * drift
            pts[1:-1] = segment.points_at_parameters(ts[1:-1])

        dists = np.sqrt(np.sum(np.diff(pts, axis=0)**2, axis=1))
        travelled = np.cumsum(dists)
        if travelled[-1] > 0:
            travelled *= length / travelled[-1]
        else:
            travelled[:] = 0.0
        distances = np.minimum(offset + travelled, offset + length)
        distances[-1] = offset + length

        tangents = segment.tangents_at_parameters(ts[1:])
        pts.flags.writeable = False
        tangents.flags.writeable = False
        return [
            Sample(float(distances[i]), pts[i + 1], tangents[i], index, float(ts[i + 1]))
            for i in range(count)
        ]

    def _insert_jumps(self, samples: List[Sample]) -> Tuple[List[Sample], List[float]]:
        """Splice boundary samples around every gap between consecutive segments"""
        eps = self.config.jump_epsilon
        result = [samples[0]]
        jumps = []
        for prev, nxt in zip(samples, samples[1:]):
            if prev.segment_index != nxt.segment_index:
                prev_segment = self.segments[prev.segment_index]
                next_segment = self.segments[nxt.segment_index]
                if not np.array_equal(prev_segment.d, next_segment.a):
                    mid = (prev.distance + nxt.distance) / 2
                    result.append(Sample(
                        max(prev.distance, mid - eps), prev_segment.d,
                        prev_segment.tangent_at_parameter(1.0), prev.segment_index, 1.0
                    ))
                    result.append(Sample(
                        min(nxt.distance, mid + eps), next_segment.a,
                        next_segment.tangent_at_parameter(0.0), nxt.segment_index, 0.0
                    ))
                    jumps.append(mid)
                    logging.debug(f"Discontinuity between segments {prev.segment_index} and "
                                  f"{nxt.segment_index} at length {mid:.4f}")
            result.append(nxt)
        return result, jumps

    def _build_ranges(self, samples: Sequence[Sample]) -> Tuple[SegmentRange, ...]:
        ranges = [None] * len(self.segments)
        for sample in samples:
            current = ranges[sample.segment_index]
            start = sample.distance if current is None else current.start
            ranges[sample.segment_index] = SegmentRange(start, sample.distance)
        return tuple(ranges)

    def get_total_length(self) -> float:
        return self.length

    def jumps(self) -> List[float]:
        """Lengths at which the path jumps between disconnected segments"""
        return list(self._jumps)

    def segment_index_at_length(self, length: float) -> int:
        """Index of the segment that covers the given length"""
        index = bisect.bisect_right(self.segment_offsets, length) - 1
        return min(max(index, 0), len(self.segments) - 1)

    def find_closest_sample_index(self, length: float) -> int:
        """Binary search the sample table for the sample nearest to length"""
        distances = self.distances
        lo = 0
        hi = len(distances) - 1
        while lo < hi:
            mid = (lo + hi) // 2
            if distances[mid] > length:
                hi = mid - 1
            elif distances[mid] < length:
                lo = mid + 1
            else:
                return mid
        return max(0, min(len(distances) - 1, (lo + hi) // 2))

    def _bracket(self, length: float) -> Tuple[Sample, Sample, float]:
        """Closest sample, its neighbour towards length, and the mix between them"""
        last = len(self.samples) - 1
        idx_a = self.find_closest_sample_index(length)
        if self.distances[idx_a] < length:
            idx_b = min(idx_a + 1, last)
        else:
            idx_b = max(0, idx_a - 1)

        sample_a = self.samples[idx_a]
        sample_b = self.samples[idx_b]
        span = sample_b.distance - sample_a.distance
        mix = 0.0 if abs(span) < self.config.mix_epsilon else (length - sample_a.distance) / span
        return sample_a, sample_b, mix

    @staticmethod
    def _resolve_parameter(sample_a: Sample, sample_b: Sample, mix: float) -> Tuple[int, float]:
        """Pick the segment and local t to evaluate for a mix between two samples"""
        if sample_a.segment_index != sample_b.segment_index:
            # Never interpolate across a segment boundary, lean on whichever side is closer
            if mix < 0.5:
                mix_a = 2 * mix
                return sample_a.segment_index, (1 - mix_a) * sample_a.t + mix_a
            mix_b = 2 * (mix - 0.5)
            return sample_b.segment_index, mix_b * sample_b.t
        return sample_a.segment_index, (1 - mix) * sample_a.t + mix * sample_b.t

    def get_point_at_length(self, length: float, approximate: bool = False) -> np.ndarray:
        """Point at the given distance from the start of the path.

        With approximate=True the two neighbouring samples are linearly
        interpolated instead of re-evaluating the curve.
        """
        if length <= 0:
            return self.samples[0].point.copy()
        if length >= self.length:
            return self.samples[-1].point.copy()

        sample_a, sample_b, mix = self._bracket(length)
        if approximate or sample_a.segment_index > sample_b.segment_index:
            return (1 - mix) * sample_a.point + mix * sample_b.point

        segment_index, t = self._resolve_parameter(sample_a, sample_b, mix)
        return self.segments[segment_index].point_at_parameter(t)

    def get_tangent_at_length(self, length: float, approximate: bool = False) -> np.ndarray:
        """Unit tangent at the given distance from the start of the path"""
        if length <= 0:
            return self.samples[0].tangent.copy()
        if length >= self.length:
            return self.samples[-1].tangent.copy()

        sample_a, sample_b, mix = self._bracket(length)
        if approximate or sample_a.segment_index > sample_b.segment_index:
            tangent = (1 - mix) * sample_a.tangent + mix * sample_b.tangent
            return tangent / max(math.hypot(tangent[0], tangent[1]), self.config.tangent_epsilon)

        segment_index, t = self._resolve_parameter(sample_a, sample_b, mix)
        return self.segments[segment_index].tangent_at_parameter(t)

    def get_angle_at_length(self, length: float, approximate: bool = False) -> float:
        """Direction of travel in radians at the given distance"""
        tangent = self.get_tangent_at_length(length, approximate)
        return math.atan2(tangent[1], tangent[0])

    def __len__(self) -> int:
        return len(self.samples)

    def __repr__(self) -> str:
        return (f"BezierPath(segments={len(self.segments)}, length={self.length:.4f}, "
                f"samples={len(self.samples)}, jumps={len(self._jumps)})")
