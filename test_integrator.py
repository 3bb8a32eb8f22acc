import math
import unittest
import numpy as np
from config import G, M_SUN, SECONDS_PER_DAY, SimParams
from body import Body
from gravity import GravityModel
from integrator import LeapfrogIntegrator
from diagnostics import SystemDiagnostics
from orbital_state import OrbitalStateFactory

AU = 1.496e11

class TestSubstepPlan(unittest.TestCase):

    def test_splits_large_delta(self):
        n_sub, dt_sub = LeapfrogIntegrator.substep_plan(86400.0, 1000.0)
        self.assertEqual(n_sub, 87)
        self.assertAlmostEqual(dt_sub * n_sub, 86400.0)
        self.assertLessEqual(dt_sub, 1000.0)

    def test_small_delta_single_substep(self):
        self.assertEqual(LeapfrogIntegrator.substep_plan(500.0, 1000.0), (1, 500.0))

    def test_zero_max_substep_falls_back_to_default(self):
        n_sub, dt_sub = LeapfrogIntegrator.substep_plan(7200.0, 0)
        self.assertEqual(n_sub, 2)
        self.assertAlmostEqual(dt_sub, 3600.0)

    def test_max_substep_clamped_to_one_second(self):
        n_sub, dt_sub = LeapfrogIntegrator.substep_plan(10.0, 0.5)
        self.assertEqual(n_sub, 10)
        self.assertAlmostEqual(dt_sub, 1.0)

class TestLeapfrogStep(unittest.TestCase):

    def setUp(self):
        self.integrator = LeapfrogIntegrator(GravityModel())
        self.sun = Body(name='sun', mass=M_SUN, fixed=True)
        self.earth = Body(name='earth', mass=5.972e24, position=[AU, 0.0, 0.0],
                          velocity=[0.0, 0.0, -math.sqrt(G * M_SUN / AU)])
        self.bodies = [self.sun, self.earth]

    def test_non_positive_delta_is_noop(self):
        self.earth.acceleration = np.array([1.0, 2.0, 3.0])
        velocity = self.earth.velocity.copy()
        for dt in (0.0, -100.0):
            self.assertEqual(self.integrator.step(self.bodies, dt, SimParams()), 0)
        np.testing.assert_array_equal(self.earth.position, [AU, 0.0, 0.0])
        np.testing.assert_array_equal(self.earth.velocity, velocity)
        np.testing.assert_array_equal(self.earth.acceleration, [1.0, 2.0, 3.0])

    def test_pause_is_noop(self):
        before = self.earth.velocity.copy()
        self.assertEqual(self.integrator.step(self.bodies, SECONDS_PER_DAY, SimParams(pause=True)), 0)
        np.testing.assert_array_equal(self.earth.velocity, before)

    def test_returns_substep_count(self):
        n_sub = self.integrator.step(self.bodies, SECONDS_PER_DAY, SimParams(max_substep_seconds=1000.0))
        self.assertEqual(n_sub, 87)

    def test_fixed_body_does_not_move_in_pairwise_mode(self):
        self.integrator.step(self.bodies, SECONDS_PER_DAY, SimParams(n_body=True))
        np.testing.assert_array_equal(self.sun.position, np.zeros(3))
        np.testing.assert_array_equal(self.sun.velocity, np.zeros(3))
        self.assertGreater(np.linalg.norm(self.sun.acceleration), 0.0)

    def test_excluded_body_is_frozen(self):
        self.earth.included = False
        self.integrator.step(self.bodies, SECONDS_PER_DAY, SimParams())
        np.testing.assert_array_equal(self.earth.position, [AU, 0.0, 0.0])

    def test_kinematic_body_is_not_integrated(self):
        self.earth.kinematic = True
        before = self.earth.velocity.copy()
        self.integrator.step(self.bodies, SECONDS_PER_DAY, SimParams())
        np.testing.assert_array_equal(self.earth.velocity, before)

    def test_body_moves_along_orbit(self):
        self.integrator.step(self.bodies, SECONDS_PER_DAY, SimParams())
        self.assertLess(self.earth.position[2], 0.0)
        self.assertAlmostEqual(np.linalg.norm(self.earth.position) / AU, 1.0, places=6)

class TestConservation(unittest.TestCase):

    def test_energy_and_angular_momentum_bounded_over_long_run(self):
        sun = Body(name='sun', mass=M_SUN, fixed=True)
        earth = Body(name='earth', mass=5.972e24, semi_major_axis=AU, eccentricity=0.0167)
        OrbitalStateFactory().initialize_body(earth, sun, 0.0)
        bodies = [sun, earth]
        diagnostics = SystemDiagnostics()
        integrator = LeapfrogIntegrator(GravityModel())
        params = SimParams(softening=1e6, max_substep_seconds=SECONDS_PER_DAY)

        start = diagnostics.compute_system_energy_and_momentum(bodies, params.softening)
        for _ in range(10000):
            integrator.step(bodies, SECONDS_PER_DAY, params)
        end = diagnostics.compute_system_energy_and_momentum(bodies, params.softening)

        self.assertLess(abs(end.total - start.total) / abs(start.total), 1e-3)
        self.assertLess(abs(end.angular_momentum_magnitude - start.angular_momentum_magnitude)
                        / start.angular_momentum_magnitude, 1e-6)

if __name__ == '__main__':
    unittest.main(argv=['first-arg-is-ignored'], exit=False)
