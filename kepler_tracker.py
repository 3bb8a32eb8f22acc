# kepler_tracker.py
import math
from dataclasses import dataclass
from typing import Dict, List
from config import config, SimParams
from body import Body
from physics_utils import areal_rate, safe_divide


@dataclass
class KeplerSample:
    """One Kepler's-second-law reading for a body.

    Attributes:
        name (str): Body name.
        areal_rate (float): Instantaneous 0.5*|r x v| in m^2/s.
        deviation_percent (float): (A - A0) / A0 * 100, 0 when A0 is 0.
        relative_std_percent (float): Sample standard deviation of the running
            areal rate over |mean|, in percent.
        sample_count (int): Number of samples folded in so far.
        exceeds_threshold (bool): |deviation_percent| above the warning level.
    """
    name: str
    areal_rate: float
    deviation_percent: float
    relative_std_percent: float
    sample_count: int
    exceeds_threshold: bool


class KeplerTracker:
    """
    Tracks drift of each body's areal velocity from its initial baseline.

    For an unperturbed two-body orbit the areal rate is constant, so a growing
    deviation indicates either integration error or real perturbations (N-body
    mode, softening). Running statistics use Welford's online algorithm and
    live on the Body itself; they never influence the dynamics.
    """

    def __init__(self, threshold_percent: float = config.Diagnostics.KEPLER_DEVIATION_WARN_PERCENT):
        self.threshold_percent = threshold_percent

    @staticmethod
    def fold_sample(body: Body, value: float) -> float:
        """Adds `value` to the body's Welford accumulator and returns the sample std."""
        body.areal_count += 1
        delta = value - body.areal_mean
        body.areal_mean += delta / body.areal_count
        body.areal_m2 += delta * (value - body.areal_mean)
        if body.areal_count > 1:
            return math.sqrt(body.areal_m2 / (body.areal_count - 1))
        return 0.0

    def sample(self, body: Body) -> KeplerSample:
        """Reads the current areal rate of one body and folds it into its statistics."""
        current = areal_rate(body.position, body.velocity)
        std = self.fold_sample(body, current)
        deviation = safe_divide((current - body.initial_areal_rate) * 100.0, body.initial_areal_rate)
        rel_std = safe_divide(std * 100.0, abs(body.areal_mean))
        return KeplerSample(
            name=body.name,
            areal_rate=current,
            deviation_percent=deviation,
            relative_std_percent=rel_std,
            sample_count=body.areal_count,
            exceeds_threshold=abs(deviation) > self.threshold_percent,
        )

    def update(self, bodies: List[Body], params: SimParams) -> Dict[int, KeplerSample]:
        """
        Samples every included, non-primary, non-kinematic body.

        Returns an empty mapping when `params.check_kepler` is off.

        Returns:
            Dict[int, KeplerSample]: Samples keyed by body index.
        """
        if not params.check_kepler:
            return {}
        samples: Dict[int, KeplerSample] = {}
        for index, body in enumerate(bodies):
            if index == 0 or not body.included or body.kinematic:
                continue
            samples[index] = self.sample(body)
        return samples
