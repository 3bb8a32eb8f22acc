# moon_constraint.py
import math
import numpy as np
from dataclasses import dataclass
from typing import List
from config import config
from body import Body
from orbital_state import PLANE_AXES
from physics_utils import PhysicsError, oriented_tangent


@dataclass
class KinematicConstraint:
    """
    Closed-form circular orbit of one body around a parent body.

    After each physics step the constrained body is placed at the fixed
    `radius` from its parent's already-integrated position, at phase `theta`,
    moving with the parent's velocity plus a tangential `mean_motion * radius`.
    The constrained body is marked kinematic, so the gravity model and the
    integrator leave it alone: it neither perturbs nor is perturbed by the
    rest of the system. This keeps a satellite stable at an orbital scale far
    below the planetary spacing.

    Attributes:
        constrained_index (int): Index of the body whose state is overwritten.
        parent_index (int): Index of the body it circles.
        radius (float): Fixed orbital radius in meters.
        theta (float): Current phase angle in radians.
        mean_motion (float): n = sqrt(G * M_parent / r^3) in rad/s, fixed at creation.
        up_axis (int): Orbital-plane normal shared with the rest of the system.
    """
    constrained_index: int
    parent_index: int
    radius: float
    mean_motion: float
    theta: float = 0.0
    up_axis: int = config.Physics.UP_AXIS

    @classmethod
    def circular(cls, bodies: List[Body], constrained_index: int, parent_index: int,
                 radius: float, g: float = config.Physics.G) -> "KinematicConstraint":
        """Creates a constraint with the circular mean motion of the current parent mass.

        Raises:
            PhysicsError: If the indices are invalid or equal, or the parent
                mass or the radius is not positive.
        """
        n = len(bodies)
        if not (0 <= constrained_index < n and 0 <= parent_index < n):
            raise PhysicsError(f"Constraint indices ({constrained_index}, {parent_index}) out of range for {n} bodies.")
        if constrained_index == parent_index:
            raise PhysicsError(f"Body {constrained_index} cannot be constrained to orbit itself.")
        parent_mass = bodies[parent_index].mass
        if not (parent_mass > 0 and radius > 0):
            raise PhysicsError(f"Constraint needs a positive parent mass and radius, got M={parent_mass}, r={radius}.")
        mean_motion = math.sqrt(g * parent_mass / radius ** 3)
        return cls(constrained_index, parent_index, radius, mean_motion)

    def relative_state(self):
        """Position and velocity of the constrained body relative to its parent."""
        cos_axis, sin_axis = PLANE_AXES[self.up_axis]
        rel = np.zeros(3)
        rel[cos_axis] = self.radius * math.cos(self.theta)
        rel[sin_axis] = self.radius * math.sin(self.theta)
        vel = oriented_tangent(rel, self.up_axis) * (self.mean_motion * self.radius)
        return rel, vel

    def apply(self, bodies: List[Body]) -> None:
        """Overwrites the constrained body's state from the parent and the current phase."""
        body = bodies[self.constrained_index]
        parent = bodies[self.parent_index]
        rel, vel = self.relative_state()
        body.position = parent.position + rel
        body.velocity = parent.velocity + vel
        body.acceleration = np.zeros(3)
        body.kinematic = True

    def advance(self, bodies: List[Body], dt_sim: float) -> None:
        """Advances the phase by n*dt and re-applies the constraint."""
        self.theta += self.mean_motion * dt_sim
        self.apply(bodies)

    def reset(self, bodies: List[Body]) -> None:
        """Returns the phase to zero and re-applies relative to the (reset) parent."""
        self.theta = 0.0
        self.apply(bodies)
