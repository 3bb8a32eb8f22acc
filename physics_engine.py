# physics_engine.py
import logging
from typing import Dict, List, Optional
from config import ConfigurationError, SimParams
from body import Body
from gravity import GravityModel
from integrator import LeapfrogIntegrator
from diagnostics import SystemDiagnostics, EnergyMomentumReport
from moon_constraint import KinematicConstraint


class PhysicsEngine:
    """Owns the body arena and every physics operation on it.

    Bodies are addressed by the integer index returned from `add_body()`;
    index 0 is the primary by convention. Bodies are never removed, only
    excluded via `included`. A name directory is maintained alongside the
    list so name lookups never scan it.

    Kinematic constraints are evaluated, in registration order, right after
    every effective integrator step.

    Attributes:
        bodies (List[Body]): The arena, in insertion order.
        constraints (List[KinematicConstraint]): Registered kinematic constraints.
        gravity (GravityModel): Force model used by the integrator and
            `compute_accelerations()`.
        integrator (LeapfrogIntegrator): Time integrator.
        diagnostics (SystemDiagnostics): Energy/momentum observer.
    """

    def __init__(self, gravity: Optional[GravityModel] = None):
        self.bodies: List[Body] = []
        self.constraints: List[KinematicConstraint] = []
        self._directory: Dict[str, int] = {}
        self.gravity = gravity or GravityModel()
        self.integrator = LeapfrogIntegrator(self.gravity)
        self.diagnostics = SystemDiagnostics()

    def add_body(self, body: Body) -> int:
        """Appends a body and returns its index.

        Raises:
            ConfigurationError: If another body already uses the same name.
        """
        if body.name in self._directory:
            raise ConfigurationError(f"A body named '{body.name}' already exists (index {self._directory[body.name]}).")
        self.bodies.append(body)
        index = len(self.bodies) - 1
        self._directory[body.name] = index
        return index

    def index_of(self, name: str) -> int:
        """Index of the body called `name`; raises KeyError if unknown."""
        return self._directory[name]

    def body(self, index: int) -> Body:
        return self.bodies[index]

    def add_kinematic_constraint(self, constrained_index: int, parent_index: int, radius: float) -> KinematicConstraint:
        """Binds a body to a circular orbit around a parent and applies it immediately.

        Raises:
            PhysicsError: From `KinematicConstraint.circular()` for invalid requests.
        """
        constraint = KinematicConstraint.circular(self.bodies, constrained_index, parent_index, radius,
                                                  g=self.gravity.g)
        constraint.apply(self.bodies)
        self.constraints.append(constraint)
        logging.debug(f"Constraint added: {self.bodies[constrained_index].name} around "
                      f"{self.bodies[parent_index].name}, r={radius:.6e} m, n={constraint.mean_motion:.6e} rad/s")
        return constraint

    def compute_accelerations(self, softening: float, use_full_n_body: bool) -> None:
        self.gravity.compute_accelerations(self.bodies, softening, use_full_n_body)

    def remove_center_of_mass_velocity(self):
        return self.diagnostics.remove_center_of_mass_velocity(self.bodies)

    def compute_system_energy_and_momentum(self, softening: float = 1e6,
                                           include_only: bool = True) -> EnergyMomentumReport:
        return self.diagnostics.compute_system_energy_and_momentum(self.bodies, softening, include_only)

    def step(self, dt_sim: float, params: SimParams) -> int:
        """
        Advances the system by `dt_sim` simulated seconds, then applies constraints.

        No-op (returns 0) when `dt_sim <= 0` or `params.pause` is set; in that
        case constraint phases do not advance either.

        Returns:
            int: Number of integrator substeps performed.
        """
        n_sub = self.integrator.step(self.bodies, dt_sim, params)
        if n_sub == 0:
            return 0
        logging.debug(f"Advanced {dt_sim:.3f} s in {n_sub} substeps of {dt_sim / n_sub:.3f} s")
        for constraint in self.constraints:
            constraint.advance(self.bodies, dt_sim)
        return n_sub

    def reset_constraints(self) -> None:
        for constraint in self.constraints:
            constraint.reset(self.bodies)
