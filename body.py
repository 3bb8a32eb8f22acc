# body.py
import numpy as np
from dataclasses import dataclass, field
from config import config
from physics_utils import as_vector

@dataclass
class Body:
    """Physical state of one simulated mass.

    Units: meters, kilograms, seconds. Vectors are float64 arrays of shape (3,).

    Attributes:
        name (str): Identifier, unique within a `PhysicsEngine`.
        mass (float): Mass in kilograms.
        position (np.ndarray): Position in the inertial frame.
        velocity (np.ndarray): Velocity in the inertial frame.
        acceleration (np.ndarray): Cache written by every force evaluation.
        fixed (bool): If True the integrator never moves this body.
        included (bool): If False the body neither exerts nor receives force and
            is left out of diagnostics.
        kinematic (bool): Set when a kinematic constraint owns this body's state;
            gravity and the integrator then skip it.
        semi_major_axis (float): Kepler element retained for speed recomputation.
        eccentricity (float): Kepler element retained for speed recomputation.
        initial_areal_rate (float): Baseline areal rate for Kepler drift checks.
        areal_count (int): Welford sample count.
        areal_mean (float): Welford running mean.
        areal_m2 (float): Welford running sum of squared deviations.
    """
    name: str
    mass: float
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    fixed: bool = False
    included: bool = True
    semi_major_axis: float = 0.0
    eccentricity: float = 0.0
    acceleration: np.ndarray = field(default_factory=lambda: np.zeros(3))
    kinematic: bool = False

    # Kepler bookkeeping
    initial_areal_rate: float = 0.0
    areal_count: int = 0
    areal_mean: float = 0.0
    areal_m2: float = 0.0

    def __post_init__(self):
        self.position = as_vector(self.position)
        self.velocity = as_vector(self.velocity)
        self.acceleration = as_vector(self.acceleration)
        self.mass = float(self.mass)
        self.fixed = bool(self.fixed)
        self.included = bool(self.included)

    def kinetic_energy(self) -> float:
        return 0.5 * self.mass * float(np.dot(self.velocity, self.velocity))

    def potential_with(self, other: "Body", safe_min: float = config.Physics.POTENTIAL_EPSILON_M) -> float:
        """Unsoftened pairwise potential energy -G*m1*m2/max(r, safe_min)."""
        r = float(np.linalg.norm(other.position - self.position))
        return -config.Physics.G * self.mass * other.mass / max(r, safe_min)

    def reset_areal_stats(self, baseline: float) -> None:
        """Restarts the Kepler drift accumulator from a new baseline areal rate."""
        self.initial_areal_rate = baseline
        self.areal_count = 1
        self.areal_mean = baseline
        self.areal_m2 = 0.0
