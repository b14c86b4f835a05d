import math
from dataclasses import dataclass

@dataclass(frozen=True)
class PathConfig:
    """Tuning constants shared by segment evaluation and path resampling"""
    # Target spacing between samples, in distance units
    sample_spacing: float = 2.0
    min_length_samples: int = 10
    min_segment_samples: int = 4
    refinement_passes: int = 4
    # stepSize = 1 / (sample_count * step_scale)
    step_scale: float = 10.0

    tangent_epsilon: float = 1e-4
    jump_epsilon: float = 1e-8
    mix_epsilon: float = 1e-6

    def __post_init__(self):
        if self.sample_spacing <= 0:
            raise ValueError(f"sample_spacing must be positive, got {self.sample_spacing}")
        if self.min_length_samples < 2:
            raise ValueError(f"min_length_samples must be at least 2, got {self.min_length_samples}")
        if self.min_segment_samples < 1:
            raise ValueError(f"min_segment_samples must be at least 1, got {self.min_segment_samples}")
        if self.refinement_passes < 0:
            raise ValueError(f"refinement_passes must be non-negative, got {self.refinement_passes}")
        if self.step_scale <= 0:
            raise ValueError(f"step_scale must be positive, got {self.step_scale}")
        for name in ("tangent_epsilon", "jump_epsilon", "mix_epsilon"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")

    def segment_sample_count(self, length: float) -> int:
        """Number of table samples a segment of the given length contributes"""
        return max(self.min_segment_samples, math.ceil(length / self.sample_spacing))

    def length_sample_count(self, control_length: float) -> int:
        """Number of polyline points used to estimate a curved segment's length"""
        return max(self.min_length_samples, math.ceil(control_length / self.sample_spacing))

DEFAULT_CONFIG = PathConfig()
