import math
import unittest
import numpy as np
from config import G
from body import Body
from moon_constraint import KinematicConstraint
from physics_utils import PhysicsError

class TestCircularConstraint(unittest.TestCase):

    def setUp(self):
        self.earth = Body(name='earth', mass=5.972e24, position=[1.496e11, 0.0, 0.0],
                          velocity=[0.0, 0.0, -29780.0])
        self.moon = Body(name='moon', mass=7.342e22)
        self.bodies = [self.earth, self.moon]
        self.radius = 3.844e8

    def test_mean_motion(self):
        constraint = KinematicConstraint.circular(self.bodies, 1, 0, self.radius)
        self.assertAlmostEqual(constraint.mean_motion / math.sqrt(G * 5.972e24 / self.radius ** 3), 1.0, places=12)

    def test_apply_places_body_at_radius(self):
        constraint = KinematicConstraint.circular(self.bodies, 1, 0, self.radius)
        constraint.apply(self.bodies)
        rel = self.moon.position - self.earth.position
        self.assertAlmostEqual(np.linalg.norm(rel) / self.radius, 1.0, places=12)
        self.assertAlmostEqual(rel[1], 0.0)
        self.assertTrue(self.moon.kinematic)
        np.testing.assert_array_equal(self.moon.acceleration, np.zeros(3))

    def test_relative_speed_and_rotation_sense(self):
        constraint = KinematicConstraint.circular(self.bodies, 1, 0, self.radius)
        constraint.apply(self.bodies)
        rel_v = self.moon.velocity - self.earth.velocity
        self.assertAlmostEqual(np.linalg.norm(rel_v) / (constraint.mean_motion * self.radius), 1.0, places=9)
        rel = self.moon.position - self.earth.position
        self.assertGreater(np.cross(rel, rel_v)[1], 0.0)

    def test_advance_follows_parent(self):
        constraint = KinematicConstraint.circular(self.bodies, 1, 0, self.radius)
        self.earth.position = self.earth.position + np.array([0.0, 0.0, -2.5e9])
        constraint.advance(self.bodies, 86400.0)
        self.assertAlmostEqual(constraint.theta, constraint.mean_motion * 86400.0)
        rel = self.moon.position - self.earth.position
        self.assertAlmostEqual(np.linalg.norm(rel) / self.radius, 1.0, places=9)

    def test_reset_returns_to_phase_zero(self):
        constraint = KinematicConstraint.circular(self.bodies, 1, 0, self.radius)
        constraint.advance(self.bodies, 5 * 86400.0)
        constraint.reset(self.bodies)
        self.assertEqual(constraint.theta, 0.0)
        np.testing.assert_allclose(self.moon.position - self.earth.position, [self.radius, 0.0, 0.0], atol=1e-3)

    def test_invalid_requests(self):
        with self.assertRaises(PhysicsError):
            KinematicConstraint.circular(self.bodies, 1, 1, self.radius)
        with self.assertRaises(PhysicsError):
            KinematicConstraint.circular(self.bodies, 5, 0, self.radius)
        with self.assertRaises(PhysicsError):
            KinematicConstraint.circular(self.bodies, 1, 0, 0.0)
        self.earth.mass = 0.0
        with self.assertRaises(PhysicsError):
            KinematicConstraint.circular(self.bodies, 1, 0, self.radius)

if __name__ == '__main__':
    unittest.main(argv=['first-arg-is-ignored'], exit=False)
