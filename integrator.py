# integrator.py
import math
from typing import List
from config import config, SimParams
from body import Body
from gravity import GravityModel


class LeapfrogIntegrator:
    """
    Kick-drift-kick (velocity Verlet) integrator with substepping.

    Leapfrog is symplectic: energy and angular momentum errors stay bounded
    over indefinitely long runs instead of drifting as with explicit Euler or
    RK4. A large simulated delta (from a large time scale) is split into
    equal substeps no longer than `max_substep_seconds`.

    Per substep:
        a(t)        = accelerations at x(t)
        v(t+dt/2)   = v(t) + a(t) * dt/2
        x(t+dt)     = x(t) + v(t+dt/2) * dt
        a(t+dt)     = accelerations at x(t+dt)
        v(t+dt)     = v(t+dt/2) + a(t+dt) * dt/2

    Fixed, excluded and kinematic bodies keep their position and velocity;
    their acceleration is still computed but unused.
    """

    def __init__(self, gravity: GravityModel):
        self.gravity = gravity

    @staticmethod
    def substep_plan(dt_sim: float, max_substep_seconds: float):
        """Returns (number of substeps, substep length) for a simulated delta."""
        max_sub = max(config.Physics.MIN_SUBSTEP_SECONDS,
                      max_substep_seconds or config.Physics.DEFAULT_MAX_SUBSTEP_SECONDS)
        n_sub = max(1, math.ceil(dt_sim / max_sub))
        return n_sub, dt_sim / n_sub

    def step(self, bodies: List[Body], dt_sim: float, params: SimParams) -> int:
        """
        Advances all movable bodies by `dt_sim` simulated seconds.

        No-op when `dt_sim <= 0` or `params.pause` is set.

        Returns:
            int: Number of substeps performed (0 for a no-op).
        """
        if params is None or params.pause or dt_sim <= 0:
            return 0

        n_sub, dt_sub = self.substep_plan(dt_sim, params.max_substep_seconds)
        half = 0.5 * dt_sub
        movable = [b for b in bodies if b.included and not b.fixed and not b.kinematic]

        for _ in range(n_sub):
            self.gravity.compute_accelerations(bodies, params.softening, params.n_body)
            for body in movable:
                body.velocity = body.velocity + body.acceleration * half
                body.position = body.position + body.velocity * dt_sub

            self.gravity.compute_accelerations(bodies, params.softening, params.n_body)
            for body in movable:
                body.velocity = body.velocity + body.acceleration * half

        return n_sub
