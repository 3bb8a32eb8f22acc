# orbital_state.py
import math
import logging
import numpy as np
from typing import NamedTuple, Optional
from config import config
from body import Body
from physics_utils import oriented_tangent, areal_rate

# In-plane (cos, sin) component indices for each choice of up axis.
PLANE_AXES = {0: (1, 2), 1: (0, 2), 2: (0, 1)}


class OrbitalState(NamedTuple):
    """Initial state derived from Kepler elements, relative to the primary."""
    position: np.ndarray
    velocity: np.ndarray
    radius: float
    speed: float
    areal_rate: float


class OrbitalStateFactory:
    """Builds initial positions and velocities from Kepler orbital elements.

    All orbits lie in the plane normal to `up_axis` and turn in the same sense.
    The factory has no hidden state: the same elements and index always give
    the same result, so it serves both system construction and reset.
    """

    def __init__(self, g: float = config.Physics.G, up_axis: int = config.Physics.UP_AXIS,
                 anomaly_step: float = config.Physics.INITIAL_ANOMALY_STEP_RAD):
        self.g = g
        self.up_axis = up_axis
        self.anomaly_step = anomaly_step

    def initial_anomaly(self, index: int) -> float:
        """Initial true anomaly assigned to the body at `index` in the planet list."""
        return index * self.anomaly_step

    def vis_viva_speed(self, primary_mass: float, radius: float, semi_major_axis: float) -> float:
        """
        Orbital speed from the vis-viva equation v^2 = G*M*(2/r - 1/a).

        The radicand is clamped at zero so round-off at the apsides cannot
        produce a NaN.
        """
        return math.sqrt(max(0.0, self.g * primary_mass * (2.0 / radius - 1.0 / semi_major_axis)))

    def state_from_elements(self, primary_mass: float, semi_major_axis: float,
                            eccentricity: float, theta0: float) -> OrbitalState:
        """
        Computes the state of a body at true anomaly `theta0` on a Kepler ellipse.

        Steps:
        1. Radius from the polar ellipse equation r = a(1-e^2)/(1+e*cos(theta0)).
        2. Position: r along direction theta0 within the orbital plane.
        3. Speed from vis-viva.
        4. Direction: in-plane tangent, oriented so r x v points along +up.

        Args:
            primary_mass: Mass of the attracting body in kg.
            semi_major_axis: Semi-major axis in meters.
            eccentricity: Orbital eccentricity, 0 <= e < 1.
            theta0: True anomaly in radians.

        Returns:
            OrbitalState: position/velocity relative to the primary, plus the
            radius, speed and the areal-rate baseline 0.5*|r x v|.
        """
        a = semi_major_axis
        e = eccentricity
        r = a * (1.0 - e * e) / (1.0 + e * math.cos(theta0))

        cos_axis, sin_axis = PLANE_AXES[self.up_axis]
        position = np.zeros(3)
        position[cos_axis] = r * math.cos(theta0)
        position[sin_axis] = r * math.sin(theta0)

        speed = self.vis_viva_speed(primary_mass, r, a)
        velocity = oriented_tangent(position, self.up_axis) * speed

        return OrbitalState(position, velocity, r, speed, areal_rate(position, velocity))

    def initialize_body(self, body: Body, primary: Body, theta0: float) -> OrbitalState:
        """Places `body` on its orbit around `primary` and restarts its Kepler statistics.

        Uses the body's retained `semi_major_axis` and `eccentricity`. The
        state is taken relative to the primary's current position and velocity.
        """
        state = self.state_from_elements(primary.mass, body.semi_major_axis, body.eccentricity, theta0)
        body.position = primary.position + state.position
        body.velocity = primary.velocity + state.velocity
        body.acceleration = np.zeros(3)
        body.reset_areal_stats(areal_rate(body.position, body.velocity))
        logging.debug(f"Initialized {body.name}: r={state.radius:.6e} m, v={state.speed:.6e} m/s, "
                      f"A0={state.areal_rate:.6e} m^2/s")
        return state

    def recompute_speed(self, body: Body, primary: Body) -> Optional[float]:
        """
        Re-derives a body's speed after the primary's mass changed.

        The body keeps its position; its velocity becomes the vis-viva speed at
        the current radius (using the retained semi-major axis), directed along
        the oriented tangent. Kepler statistics restart from the new areal rate.

        Returns:
            The new speed, or None if the body has no usable semi-major axis or
            sits on the primary.
        """
        relative = body.position - primary.position
        r = float(np.linalg.norm(relative))
        if body.semi_major_axis <= 0 or r <= 0:
            return None
        speed = self.vis_viva_speed(primary.mass, r, body.semi_major_axis)
        body.velocity = primary.velocity + oriented_tangent(relative, self.up_axis) * speed
        body.reset_areal_stats(areal_rate(body.position, body.velocity))
        return speed
