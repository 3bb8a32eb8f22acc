# diagnostics.py
import numpy as np
from dataclasses import dataclass, field
from typing import List
from config import config
from body import Body


@dataclass
class EnergyMomentumReport:
    """Snapshot of the conserved quantities of a body set.

    Attributes:
        kinetic (float): Total kinetic energy K in joules.
        potential (float): Total unsoftened pairwise potential energy U in joules.
        total (float): E = K + U.
        momentum (np.ndarray): Total linear momentum vector in kg m/s.
        momentum_magnitude (float): |P|.
        total_mass (float): Sum of the considered masses in kg.
        com_speed (float): Center-of-mass speed |P| / M (0 if M is 0).
        angular_momentum (np.ndarray): Total angular momentum about the origin.
        angular_momentum_magnitude (float): |L|.
    """
    kinetic: float
    potential: float
    total: float
    momentum: np.ndarray = field(default_factory=lambda: np.zeros(3))
    momentum_magnitude: float = 0.0
    total_mass: float = 0.0
    com_speed: float = 0.0
    angular_momentum: np.ndarray = field(default_factory=lambda: np.zeros(3))
    angular_momentum_magnitude: float = 0.0


class SystemDiagnostics:
    """Read-only energy/momentum observer plus the center-of-mass velocity correction."""

    def __init__(self, potential_epsilon: float = config.Physics.POTENTIAL_EPSILON_M):
        self.potential_epsilon = potential_epsilon

    def compute_system_energy_and_momentum(self, bodies: List[Body], softening: float = 1e6,
                                           include_only: bool = True) -> EnergyMomentumReport:
        """
        Sums kinetic energy, pairwise potential energy, momentum and angular momentum.

        The potential is unsoftened; only a small separation floor
        (`potential_epsilon`) guards against coincident bodies. `softening` is
        accepted so callers can pass the same tick settings as the force
        model, but it does not enter the energy.

        Args:
            bodies: Body arena.
            softening: Force softening length (unused in the energy).
            include_only: If True, bodies with `included=False` are skipped.

        Returns:
            EnergyMomentumReport: never mutates any body.
        """
        considered = [b for b in bodies if b.included or not include_only]

        kinetic = 0.0
        total_mass = 0.0
        momentum = np.zeros(3)
        angular_momentum = np.zeros(3)
        for body in considered:
            total_mass += body.mass
            kinetic += body.kinetic_energy()
            p = body.velocity * body.mass
            momentum += p
            angular_momentum += np.cross(body.position, p)

        potential = 0.0
        n = len(considered)
        for i in range(n):
            for j in range(i + 1, n):
                potential += considered[i].potential_with(considered[j], self.potential_epsilon)

        momentum_magnitude = float(np.linalg.norm(momentum))
        return EnergyMomentumReport(
            kinetic=kinetic,
            potential=potential,
            total=kinetic + potential,
            momentum=momentum,
            momentum_magnitude=momentum_magnitude,
            total_mass=total_mass,
            com_speed=momentum_magnitude / total_mass if total_mass > 0 else 0.0,
            angular_momentum=angular_momentum,
            angular_momentum_magnitude=float(np.linalg.norm(angular_momentum)),
        )

    def remove_center_of_mass_velocity(self, bodies: List[Body]) -> np.ndarray:
        """
        Shifts every included body's velocity into the center-of-mass frame.

        Applies to fixed bodies too when they are included: `fixed` only stops
        the integrator. A zero total included mass is a no-op.

        Returns:
            np.ndarray: The velocity that was subtracted (zero for a no-op).
        """
        included = [b for b in bodies if b.included]
        total_mass = sum(b.mass for b in included)
        if total_mass == 0:
            return np.zeros(3)

        momentum = np.zeros(3)
        for body in included:
            momentum += body.velocity * body.mass
        v_com = momentum / total_mass
        for body in included:
            body.velocity = body.velocity - v_com
        return v_com
