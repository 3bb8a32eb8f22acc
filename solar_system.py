# solar_system.py
import math
import logging
import numpy as np
from typing import Dict, List, Optional, Tuple
from config import config, ConfigurationError, SimParams
from body import Body
from physics_engine import PhysicsEngine
from orbital_state import OrbitalStateFactory
from kepler_tracker import KeplerTracker, KeplerSample
from physics_utils import PhysicsError, areal_rate


class SolarSystem:
    """Builds, resets and drives the preset Sun + planets + Moon system.

    This is the collaborator that sits between a presentation layer and the
    physics core: it validates external values before they reach the core,
    keeps the planet presets needed for an idempotent reset, and turns a real
    time delta into a simulated one.

    Index layout: 0 = primary, 1..N = planets in `planet_data` order, then the
    kinematically constrained moon (if a moon preset is given).

    Attributes:
        engine (PhysicsEngine): The physics core holding all bodies.
        factory (OrbitalStateFactory): Initial-condition builder.
        kepler (KeplerTracker): Areal-rate drift tracker.
        planet_indices (List[int]): Arena index of each planet, in preset order.
        moon_index (Optional[int]): Arena index of the constrained moon.
        primary_mass (float): Mass currently applied to body 0.
        last_kepler (Dict[int, KeplerSample]): Most recent Kepler samples.

    Raises:
        ConfigurationError: If `params` or the presets are invalid.
        PhysicsError: If the moon constraint cannot be created.
    """

    def __init__(self, params: SimParams,
                 planet_data: Optional[List[Dict]] = None,
                 moon_data: Optional[Dict] = config.SolarSystem.MOON_DATA,
                 moon_parent: str = config.SolarSystem.MOON_PARENT,
                 moon_radius_factor: float = config.SolarSystem.MOON_RADIUS_FACTOR):
        params.validate()
        self.planet_data = list(config.SolarSystem.PLANET_DATA if planet_data is None else planet_data)
        self.engine = PhysicsEngine()
        self.factory = OrbitalStateFactory(g=self.engine.gravity.g)
        self.kepler = KeplerTracker()
        self.planet_indices: List[int] = []
        self.moon_index: Optional[int] = None
        self.primary_mass = params.primary_mass
        self.last_kepler: Dict[int, KeplerSample] = {}

        try:
            self._create_bodies(moon_data, moon_parent, moon_radius_factor, params.n_body)
        except (KeyError, TypeError, ValueError) as e_data:
            logging.critical(f"Malformed celestial body preset: {e_data}", exc_info=True)
            raise ConfigurationError(f"Malformed celestial body preset: {e_data}")
        except PhysicsError as e_phys:
            logging.critical(f"PhysicsError during system construction: {e_phys}", exc_info=True)
            raise

        self.engine.remove_center_of_mass_velocity()
        self._restart_kepler_statistics()
        self.engine.compute_accelerations(params.softening, params.n_body)
        logging.info(f"SolarSystem initialized with {len(self.engine.bodies)} bodies: "
                     f"{[b.name for b in self.engine.bodies]}")

    @property
    def bodies(self) -> List[Body]:
        return self.engine.bodies

    @property
    def primary(self) -> Body:
        return self.engine.bodies[0]

    def _restart_kepler_statistics(self) -> None:
        # Velocities were set outside the integrator; old baselines no longer apply.
        for body in self.engine.bodies[1:]:
            if not body.kinematic:
                body.reset_areal_stats(areal_rate(body.position, body.velocity))

    def _create_bodies(self, moon_data, moon_parent, moon_radius_factor, n_body):
        primary = Body(name=config.SolarSystem.PRIMARY_NAME, mass=self.primary_mass,
                       fixed=not n_body, included=True)
        self.engine.add_body(primary)

        for i, data in enumerate(self.planet_data):
            planet = Body(name=data['name'], mass=float(data['mass_kg']),
                          semi_major_axis=float(data['distance_km']) * 1000.0,
                          eccentricity=float(data.get('e', 0.0)))
            self.factory.initialize_body(planet, primary, self.factory.initial_anomaly(i))
            self.planet_indices.append(self.engine.add_body(planet))

        if moon_data is not None:
            parent_index = self.engine.index_of(moon_parent)
            radius = float(moon_data['distance_km']) * 1000.0 * moon_radius_factor
            # The constraint keeps the orbit circular at this radius.
            moon = Body(name=moon_data['name'], mass=float(moon_data['mass_kg']),
                        semi_major_axis=radius, eccentricity=0.0)
            self.moon_index = self.engine.add_body(moon)
            self.engine.add_kinematic_constraint(self.moon_index, parent_index, radius)
            logging.info(f"{moon.name} linked to {moon_parent} at radius {radius:.6e} m (index {self.moon_index}).")

    def reset(self, params: SimParams) -> None:
        """
        Puts every body back on its initial orbit.

        The primary returns to the origin at rest, keeping the mass last set
        through `apply_primary_mass()` (or the construction mass), and is
        pinned only in primary-only mode. Planets are rebuilt from their
        presets (same anomalies as on construction) around that mass;
        constraints return to phase zero around their reset parents. Finishes
        with a center-of-mass correction and a fresh force evaluation. Kepler
        statistics restart for every planet.
        """
        params.validate()
        primary = self.primary
        primary.position = np.zeros(3)
        primary.velocity = np.zeros(3)
        primary.acceleration = np.zeros(3)
        primary.mass = self.primary_mass
        primary.fixed = not params.n_body

        for i, index in enumerate(self.planet_indices):
            self.factory.initialize_body(self.engine.bodies[index], primary, self.factory.initial_anomaly(i))

        self.engine.reset_constraints()
        self.engine.remove_center_of_mass_velocity()
        self._restart_kepler_statistics()
        self.engine.compute_accelerations(params.softening, params.n_body)
        self.last_kepler = {}
        logging.info("SolarSystem reset to initial orbits.")

    def apply_primary_mass(self, new_mass, params: SimParams) -> bool:
        """
        Changes the primary's mass, optionally re-deriving planet speeds.

        Invalid masses (non-numeric, non-finite, non-positive) are rejected
        with a warning and leave the system untouched.

        Returns:
            bool: True if the mass was applied.
        """
        try:
            mass = float(new_mass)
        except (TypeError, ValueError):
            logging.warning(f"Invalid primary mass value: {new_mass!r}")
            return False
        if not math.isfinite(mass) or mass <= 0:
            logging.warning(f"Invalid primary mass value: {new_mass!r}")
            return False

        before = self.engine.compute_system_energy_and_momentum(params.softening, True)
        primary = self.primary
        primary.mass = mass
        self.primary_mass = mass

        if params.recompute_speeds:
            for body in self.engine.bodies[1:]:
                if not body.included or body.kinematic:
                    continue
                self.factory.recompute_speed(body, primary)

        self.engine.compute_accelerations(params.softening, params.n_body)
        if params.n_body:
            self.engine.remove_center_of_mass_velocity()
            self._restart_kepler_statistics()

        after = self.engine.compute_system_energy_and_momentum(params.softening, True)
        logging.info(f"Primary mass set to {mass:.3e} kg: E before={before.total:.6e} J, "
                     f"E after={after.total:.6e} J")
        return True

    def set_body_included(self, name: str, included: bool, params: SimParams) -> bool:
        """Includes or excludes a body by name; returns False for an unknown name."""
        try:
            index = self.engine.index_of(name)
        except KeyError:
            logging.warning(f"set_body_included: body not found for '{name}'")
            return False
        self.engine.bodies[index].included = bool(included)
        self.engine.compute_accelerations(params.softening, params.n_body)
        if params.n_body:
            self.engine.remove_center_of_mass_velocity()
            self._restart_kepler_statistics()
        return True

    def set_n_body(self, enabled: bool, params: SimParams) -> None:
        """Switches gravity mode; the primary is pinned only in primary-only mode."""
        self.primary.fixed = not enabled
        self.engine.compute_accelerations(params.softening, bool(enabled))

    def tick(self, delta_real: float, params: SimParams) -> Tuple[float, Dict[int, KeplerSample]]:
        """
        Advances the simulation by one real-time tick.

        Args:
            delta_real: Real seconds elapsed since the previous tick.
            params: Tick configuration; `time_scale` converts real to simulated time.

        Returns:
            Tuple[float, Dict[int, KeplerSample]]: The simulated delta and the
            Kepler samples of this tick (empty when `check_kepler` is off).
        """
        dt_sim = delta_real * params.time_scale
        self.engine.step(dt_sim, params)
        self.last_kepler = self.kepler.update(self.engine.bodies, params)
        return dt_sim, self.last_kepler
