# config.py
import math
import logging
from dataclasses import dataclass

# Configure basic logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(module)s - %(message)s')

# Fundamental Physical Constants (SI units throughout: m, kg, s)
G = 6.674e-11  # m^3 kg^-1 s^-2
M_SUN = 1.989e30  # kg
SECONDS_PER_DAY = 86400.0

class ConfigurationError(Exception):
    """Custom exception for simulation configuration errors.

    Raised by `SimulationConfig.validate()`, `SimParams.validate()` and by
    `PhysicsEngine.add_body()` when settings are invalid, inconsistent, or
    would leave the body arena in an ambiguous state (e.g. duplicate names).

    Attributes:
        message (str): A human-readable explanation of the configuration error.
                       This is the first argument passed to the exception constructor.
    """
    pass


@dataclass
class SimParams:
    """Per-tick configuration handed to the physics core by its caller.

    The core never reads settings from a global object; every operation that
    depends on these values receives a `SimParams` explicitly.

    Attributes:
        time_scale (float): Simulated seconds per real second.
        pause (bool): If True, `step()` is a no-op.
        softening (float): Softening length in meters added (squared) to the
            squared separation in force evaluation.
        n_body (bool): Selects full pairwise gravity (True) or primary-only (False).
        max_substep_seconds (float): Upper bound on the integrator substep length.
        check_kepler (bool): Enables KeplerTracker updates.
        primary_mass (float): Mass in kg applied to body 0 on build, reset and
            `SolarSystem.apply_primary_mass()`.
        recompute_speeds (bool): Whether a primary-mass change re-derives orbital
            speeds from vis-viva.
    """
    time_scale: float = SECONDS_PER_DAY
    pause: bool = False
    softening: float = 1e6
    n_body: bool = False
    max_substep_seconds: float = 1000.0
    check_kepler: bool = True
    primary_mass: float = M_SUN
    recompute_speeds: bool = True

    def validate(self) -> "SimParams":
        """Checks the numeric options and returns `self` for chaining.

        Raises:
            ConfigurationError: If any value is non-finite or out of range.
        """
        for name in ("time_scale", "softening", "max_substep_seconds", "primary_mass"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ConfigurationError(f"SimParams.{name} must be a finite number, got {value!r}.")
        if self.time_scale < 0:
            raise ConfigurationError(f"SimParams.time_scale ({self.time_scale}) cannot be negative.")
        if self.softening < 0:
            raise ConfigurationError(f"SimParams.softening ({self.softening}) cannot be negative.")
        if self.max_substep_seconds <= 0:
            raise ConfigurationError(f"SimParams.max_substep_seconds ({self.max_substep_seconds}) must be positive.")
        if self.primary_mass <= 0:
            raise ConfigurationError(f"SimParams.primary_mass ({self.primary_mass}) must be positive.")
        return self


class SimulationConfig:
    """Centralized, read-only presets for the orbital simulation.

    Parameters are grouped into nested static classes (`Physics`,
    `SolarSystem`, `Diagnostics`, `Monitoring`, `Debug`). An instance named
    `config` is created at the end of this module and validated on import.
    Nothing in here is mutated at runtime: tick-level settings live in
    `SimParams` instead.

    Example Usage:
        >>> from config import config
        >>> config.Physics.G
        6.674e-11
        >>> config.SolarSystem.PLANET_DATA[2]['name']
        'earth'
    """

    # --- Physics Configuration ---
    class Physics:
        """Constants used by the physics core.

        Attributes:
            G (float): Gravitational constant in m^3 kg^-1 s^-2.
            SUN_MASS_KG (float): Reference mass of the primary.
            POTENTIAL_EPSILON_M (float): Separation floor for potential energy.
            INITIAL_ANOMALY_STEP_RAD (float): Initial true anomaly increment per
                planet index, so bodies do not start collinear.
            UP_AXIS (int): Component index of the shared orbital-plane normal (y).
            DEFAULT_MAX_SUBSTEP_SECONDS (float): Fallback substep bound when a
                tick configuration supplies none.
            MIN_SUBSTEP_SECONDS (float): Lower clamp on the substep bound.
        """
        G = G
        SUN_MASS_KG = M_SUN
        POTENTIAL_EPSILON_M = 1e-6
        INITIAL_ANOMALY_STEP_RAD = 0.6
        UP_AXIS = 1
        DEFAULT_MAX_SUBSTEP_SECONDS = 3600.0
        MIN_SUBSTEP_SECONDS = 1.0

    # --- Solar System Configuration ---
    class SolarSystem:
        """Preset bodies for the default system.

        Attributes:
            PRIMARY_NAME (str): Name of body 0.
            PLANET_DATA (List[Dict]): Planets in index order; `distance_km` is the
                semi-major axis, `e` the eccentricity.
            MOON_DATA (Dict): The kinematically constrained satellite.
            MOON_PARENT (str): Name of the body the moon is bound to.
            MOON_RADIUS_FACTOR (float): Multiplier applied to the moon's real
                distance so it stays visually separated from its parent.
        """
        PRIMARY_NAME = 'sun'
        PLANET_DATA = [
            {'name': 'mercury', 'distance_km': 57910000.0, 'mass_kg': 3.3011e23, 'e': 0.2056},
            {'name': 'venus', 'distance_km': 108200000.0, 'mass_kg': 4.8675e24, 'e': 0.0068},
            {'name': 'earth', 'distance_km': 149600000.0, 'mass_kg': 5.972e24, 'e': 0.0167},
            {'name': 'mars', 'distance_km': 227900000.0, 'mass_kg': 6.4171e23, 'e': 0.0934},
            {'name': 'jupiter', 'distance_km': 778500000.0, 'mass_kg': 1.898e27, 'e': 0.0489},
            {'name': 'saturn', 'distance_km': 1429400000.0, 'mass_kg': 5.683e26, 'e': 0.0565},
            {'name': 'uranus', 'distance_km': 2870990000.0, 'mass_kg': 8.681e25, 'e': 0.0457},
            {'name': 'neptune', 'distance_km': 4498250000.0, 'mass_kg': 1.024e26, 'e': 0.0113},
        ]
        MOON_DATA = {'name': 'moon', 'distance_km': 384400.0, 'mass_kg': 7.342e22, 'e': 0.0549}
        MOON_PARENT = 'earth'
        MOON_RADIUS_FACTOR = 26.0

    # --- Diagnostics Configuration ---
    class Diagnostics:
        """Thresholds used when reporting diagnostic state.

        Attributes:
            KEPLER_DEVIATION_WARN_PERCENT (float): Areal-rate deviation above
                which a Kepler sample is flagged.
        """
        KEPLER_DEVIATION_WARN_PERCENT = 1.0

    # --- Monitoring Configuration ---
    class Monitoring:
        """Configuration for system resource monitoring in the runner.

        Attributes:
            MEMORY_USAGE_WARN_MB (int): Memory usage threshold in Megabytes. If exceeded,
                                        a warning is logged.
            MEMORY_CHECK_INTERVAL_TICKS (int): Frequency (in ticks) at which
                                               memory usage is checked.
        """
        MEMORY_USAGE_WARN_MB = 1024
        MEMORY_CHECK_INTERVAL_TICKS = 500

    # --- Debug Configuration ---
    class Debug:
        """Configuration for periodic diagnostic logging in the runner.

        Attributes:
            MONITOR_ENERGY_CONSERVATION (bool): If True, periodically logs the total
                                                energy drift of the system.
            ENERGY_CHECK_INTERVAL_TICKS (int): Frequency (ticks) for energy checks.
            KEPLER_REPORT_INTERVAL_TICKS (int): Frequency (ticks) for Kepler reports.
        """
        MONITOR_ENERGY_CONSERVATION = True
        ENERGY_CHECK_INTERVAL_TICKS = 100
        KEPLER_REPORT_INTERVAL_TICKS = 100

    def __init__(self):
        self.validate()

    def validate(self):
        """Performs validation of the preset configuration.

        Checks physical constants, every planet and the moon entry (finite
        positive mass and semi-major axis, eccentricity in [0, 1), unique
        names), that the moon's parent exists, and that monitoring intervals
        are positive.

        Raises:
            ConfigurationError: If any configuration setting is found to be invalid.
        """
        if self.Physics.G <= 0:
            raise ConfigurationError("Physics.G must be positive.")
        if self.Physics.SUN_MASS_KG <= 0:
            raise ConfigurationError("Physics.SUN_MASS_KG must be positive.")
        if self.Physics.POTENTIAL_EPSILON_M <= 0:
            raise ConfigurationError("Physics.POTENTIAL_EPSILON_M must be positive.")
        if self.Physics.UP_AXIS not in (0, 1, 2):
            raise ConfigurationError(f"Physics.UP_AXIS ({self.Physics.UP_AXIS}) must be 0, 1 or 2.")
        if not (0 < self.Physics.MIN_SUBSTEP_SECONDS <= self.Physics.DEFAULT_MAX_SUBSTEP_SECONDS):
            raise ConfigurationError(
                f"Physics substep bounds invalid: MIN_SUBSTEP_SECONDS ({self.Physics.MIN_SUBSTEP_SECONDS}) "
                f"must be > 0 and <= DEFAULT_MAX_SUBSTEP_SECONDS ({self.Physics.DEFAULT_MAX_SUBSTEP_SECONDS})."
            )

        names = [self.SolarSystem.PRIMARY_NAME]
        for data in self.SolarSystem.PLANET_DATA + [self.SolarSystem.MOON_DATA]:
            name = data.get('name')
            mass = data.get('mass_kg', -1.0)
            distance = data.get('distance_km', -1.0)
            ecc = data.get('e', 0.0)
            if not name:
                raise ConfigurationError(f"Celestial body entry {data} has no name.")
            if name in names:
                raise ConfigurationError(f"Celestial body name '{name}' is defined more than once.")
            names.append(name)
            if not math.isfinite(mass) or mass <= 0:
                raise ConfigurationError(f"Mass of celestial body '{name}' ({mass}) must be finite and positive.")
            if not math.isfinite(distance) or distance <= 0:
                raise ConfigurationError(f"Semi-major axis of celestial body '{name}' ({distance}) must be finite and positive.")
            if not (0.0 <= ecc < 1.0):
                raise ConfigurationError(f"Eccentricity of celestial body '{name}' ({ecc}) must be >= 0 and < 1.")

        planet_names = [p['name'] for p in self.SolarSystem.PLANET_DATA]
        if self.SolarSystem.MOON_PARENT not in planet_names:
            raise ConfigurationError(f"Moon parent '{self.SolarSystem.MOON_PARENT}' not found in PLANET_DATA.")
        if self.SolarSystem.MOON_RADIUS_FACTOR <= 0:
            raise ConfigurationError("SolarSystem.MOON_RADIUS_FACTOR must be positive.")

        if self.Diagnostics.KEPLER_DEVIATION_WARN_PERCENT <= 0:
            raise ConfigurationError("Diagnostics.KEPLER_DEVIATION_WARN_PERCENT must be positive.")
        if self.Monitoring.MEMORY_CHECK_INTERVAL_TICKS <= 0 or self.Monitoring.MEMORY_USAGE_WARN_MB <= 0:
            raise ConfigurationError("Monitoring interval and memory threshold must be positive.")
        if self.Debug.ENERGY_CHECK_INTERVAL_TICKS <= 0 or self.Debug.KEPLER_REPORT_INTERVAL_TICKS <= 0:
            raise ConfigurationError("Debug check intervals must be positive.")

        logging.debug("Configuration validated successfully.")


# --- Instantiate the configuration ---
# e.g., from config import config
try:
    config = SimulationConfig()
except ConfigurationError as e:
    logging.error(f"FATAL CONFIGURATION ERROR: {e}", exc_info=True)
    raise
