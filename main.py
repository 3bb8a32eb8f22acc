# main.py
import io
import os
import math
import logging
import cProfile
import pstats
import argparse # For command line options
import psutil # For memory monitoring

from config import config, ConfigurationError, SimParams, SECONDS_PER_DAY
from solar_system import SolarSystem
from physics_utils import safe_divide

class OrbitalSimulation:
    """Drives the solar system headlessly with a fixed real-time tick.

    Stands in for a rendering loop: every tick converts a real delta into
    simulated time through `SolarSystem.tick()`, then periodically reports the
    diagnostics a dashboard would show.

    Responsibilities:
    -   Energy-conservation checks every `config.Debug.ENERGY_CHECK_INTERVAL_TICKS`,
        reporting drift relative to the energy at start (or last reset).
    -   Kepler's-second-law reports every `config.Debug.KEPLER_REPORT_INTERVAL_TICKS`,
        with a warning for bodies whose areal-rate deviation exceeds the threshold.
    -   Surfacing non-finite state: once NaN/inf enters the bodies, the core
        keeps running; this loop logs an error and stops.
    -   Memory monitoring via `psutil`.

    Attributes:
        params (SimParams): Tick configuration owned by this runner.
        system (SolarSystem): The simulated system.
        initial_energy (float): Total energy at start or last reset.
        initial_angular_momentum (float): |L| at start or last reset.
        tick_count (int): Ticks run so far.
        running (bool): Cleared when the loop must stop.
        process (psutil.Process): Current process, for memory monitoring.
    """
    def __init__(self, params: SimParams):
        """Builds the system from the presets in `config`.

        Raises:
            ConfigurationError: If `params` or the presets are invalid.
        """
        try:
            self.params = params.validate()
            self.system = SolarSystem(self.params)
        except ConfigurationError as e:
            logging.critical(f"Failed to initialize OrbitalSimulation due to ConfigurationError: {e}", exc_info=True)
            raise

        self.tick_count = 0
        self.running = True
        self.process = psutil.Process(os.getpid())
        self._record_baseline()
        logging.info("OrbitalSimulation initialized successfully.")

    def _record_baseline(self):
        report = self.system.engine.compute_system_energy_and_momentum(self.params.softening, True)
        self.initial_energy = report.total
        self.initial_angular_momentum = report.angular_momentum_magnitude

    def reset(self):
        self.system.reset(self.params)
        self._record_baseline()

    def check_energy(self):
        """Logs energy and angular-momentum drift; returns False if the state is non-finite."""
        report = self.system.engine.compute_system_energy_and_momentum(self.params.softening, True)
        if not (math.isfinite(report.total) and math.isfinite(report.momentum_magnitude)):
            logging.error(f"Non-finite system state at tick {self.tick_count}: E={report.total}, |P|={report.momentum_magnitude}")
            return False
        energy_change_percent = safe_divide((report.total - self.initial_energy) * 100.0, abs(self.initial_energy))
        l_change_percent = safe_divide((report.angular_momentum_magnitude - self.initial_angular_momentum) * 100.0,
                                       self.initial_angular_momentum)
        logging.info(f"ENERGY CHECK (Tick {self.tick_count}): K={report.kinetic:.6e}, U={report.potential:.6e}, "
                     f"E={report.total:.6e} J ({energy_change_percent:+.6f}%), |L| drift {l_change_percent:+.6f}%, "
                     f"v_com={report.com_speed:.6e} m/s")
        return True

    def report_kepler(self):
        for index, sample in self.system.last_kepler.items():
            message = (f"KEPLER {sample.name}: A={sample.areal_rate / 1e6:.4f} km^2/s, "
                       f"dev {sample.deviation_percent:.4f}% (sigma_rel {sample.relative_std_percent:.4f}%)")
            if sample.exceeds_threshold:
                logging.warning(message)
            else:
                logging.debug(message)

    def check_memory(self):
        try:
            memory_mb = self.process.memory_info().rss / (1024 * 1024)
            if memory_mb > config.Monitoring.MEMORY_USAGE_WARN_MB:
                logging.warning(f"High memory usage: {memory_mb:.2f} MB at tick {self.tick_count}")
            else:
                logging.debug(f"Memory usage: {memory_mb:.2f} MB at tick {self.tick_count}")
        except psutil.Error as e_psutil:
            logging.error(f"Memory monitoring failed at tick {self.tick_count}: {e_psutil}")

    def run(self, ticks: int, tick_seconds: float) -> int:
        """Runs up to `ticks` ticks of `tick_seconds` real seconds each.

        Returns:
            int: Number of ticks actually run.
        """
        ran = 0
        for _ in range(ticks):
            if not self.running:
                break
            self.system.tick(tick_seconds, self.params)
            self.tick_count += 1
            ran += 1

            if config.Debug.MONITOR_ENERGY_CONSERVATION and self.tick_count % config.Debug.ENERGY_CHECK_INTERVAL_TICKS == 0:
                if not self.check_energy():
                    self.running = False
            if self.params.check_kepler and self.tick_count % config.Debug.KEPLER_REPORT_INTERVAL_TICKS == 0:
                self.report_kepler()
            if self.tick_count % config.Monitoring.MEMORY_CHECK_INTERVAL_TICKS == 0:
                self.check_memory()
        return ran


def build_parser() -> argparse.ArgumentParser:
    defaults = SimParams()
    parser = argparse.ArgumentParser(description="Run the orbital simulation headlessly and log conservation diagnostics.")
    parser.add_argument("--ticks", type=int, default=1000, help="Number of ticks to run.")
    parser.add_argument("--tick-seconds", type=float, default=1.0 / 60.0, help="Real seconds per tick.")
    parser.add_argument("--time-scale", type=float, default=defaults.time_scale,
                        help="Simulated seconds per real second.")
    parser.add_argument("--n-body", action="store_true", help="Use full pairwise gravity instead of primary-only.")
    parser.add_argument("--softening", type=float, default=defaults.softening, help="Softening length in meters.")
    parser.add_argument("--max-substep", type=float, default=defaults.max_substep_seconds,
                        help="Upper bound on integrator substep length in simulated seconds.")
    parser.add_argument("--no-kepler", action="store_true", help="Disable Kepler's-second-law tracking.")
    parser.add_argument("--primary-mass", type=float, default=defaults.primary_mass, help="Mass of the primary in kg.")
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Enable profiling. Statistics will be saved to 'simulation_profile.prof'."
    )
    return parser


def params_from_args(args) -> SimParams:
    return SimParams(
        time_scale=args.time_scale,
        softening=args.softening,
        n_body=args.n_body,
        max_substep_seconds=args.max_substep,
        check_kepler=not args.no_kepler,
        primary_mass=args.primary_mass,
    )


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    profiler = None
    if args.profile:
        profiler = cProfile.Profile()
        profiler.enable()
        logging.info("cProfile profiling enabled. Output will be saved to simulation_profile.prof upon completion.")

    exit_code = 0
    try:
        params = params_from_args(args)
        simulation = OrbitalSimulation(params)
        ran = simulation.run(args.ticks, args.tick_seconds)
        simulated_days = ran * args.tick_seconds * params.time_scale / SECONDS_PER_DAY
        logging.info(f"Simulation finished after {ran} ticks ({simulated_days:.2f} simulated days).")
        simulation.check_energy()
        if not simulation.running:
            exit_code = 1
    except ConfigurationError as e_config:
        logging.critical(f"Simulation could not start due to a ConfigurationError: {e_config}", exc_info=True)
        exit_code = 2
    finally:
        if profiler:
            profiler.disable()
            stats_file = "simulation_profile.prof"
            try:
                profiler.dump_stats(stats_file)
                s = io.StringIO()
                pstats.Stats(profiler, stream=s).sort_stats('cumulative').print_stats(20)
                logging.info(f"Profiling data saved to {stats_file}\n{s.getvalue()}")
            except OSError as e_profile_dump:
                logging.error(f"Failed to save profiling data to {stats_file}: {e_profile_dump}", exc_info=True)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
