# gravity.py
import numpy as np
from typing import List
from config import config
from body import Body


class GravityModel:
    """
    Softened Newtonian gravity with two mutually exclusive force laws.

    The acceleration on body b due to a mass M at separation vector d is:
        a = G * M * d / (|d|^2 + s^2)^(3/2)
    where s is the softening length, which keeps forces finite as two bodies
    approach coincidence.

    Modes:
    - Primary-only: every included non-primary body accelerates toward body 0,
      whatever body 0's own flags are. Body 0 receives nothing.
    - Full pairwise: every unique pair of included bodies attracts mutually,
      with equal and opposite forces (Newton's third law).

    Bodies owned by a kinematic constraint (`kinematic=True`) neither exert nor
    receive force in either mode.
    """

    def __init__(self, g: float = config.Physics.G):
        self.g = g

    def compute_accelerations(self, bodies: List[Body], softening: float, use_full_n_body: bool) -> None:
        """
        Writes the gravitational acceleration of every body into `body.acceleration`.

        Every acceleration (excluded and fixed bodies included) is reset to
        zero first, so the result depends only on the current positions.

        Args:
            bodies: Body arena; index 0 is the primary by convention.
            softening: Softening length in meters.
            use_full_n_body: Selects full pairwise mode instead of primary-only.
        """
        for body in bodies:
            body.acceleration = np.zeros(3)

        eps_squared = softening * softening
        if use_full_n_body:
            self._pairwise(bodies, eps_squared)
        else:
            self._primary_only(bodies, eps_squared)

    def _primary_only(self, bodies: List[Body], eps_squared: float) -> None:
        if not bodies:
            return
        primary = bodies[0]
        gm = self.g * primary.mass
        for body in bodies[1:]:
            if not body.included or body.kinematic:
                continue
            r_vec = primary.position - body.position
            dist_sq_soft = float(np.dot(r_vec, r_vec)) + eps_squared
            if dist_sq_soft == 0.0:
                continue  # coincident with zero softening: no defined direction
            body.acceleration = r_vec * (gm / dist_sq_soft ** 1.5)

    def _pairwise(self, bodies: List[Body], eps_squared: float) -> None:
        active = [b for b in bodies if b.included and not b.kinematic]
        n = len(active)
        for i in range(n):
            bi = active[i]
            for j in range(i + 1, n):
                bj = active[j]
                r_ij = bj.position - bi.position
                dist_sq_soft = float(np.dot(r_ij, r_ij)) + eps_squared
                if dist_sq_soft == 0.0:
                    continue
                # G * r_ij / (r^2 + s^2)^1.5, scaled by the partner's mass for each side
                scaled = r_ij * (self.g / dist_sq_soft ** 1.5)
                bi.acceleration += scaled * bj.mass
                bj.acceleration -= scaled * bi.mass
