import unittest
import numpy as np
from physics_utils import safe_divide, normalize_vector, oriented_tangent, areal_rate, as_vector

class TestSafeDivide(unittest.TestCase):

    def test_typical_division(self):
        self.assertAlmostEqual(safe_divide(10, 2), 5.0)
        self.assertAlmostEqual(safe_divide(7, 3), 7/3)
        self.assertAlmostEqual(safe_divide(-10, 2), -5.0)
        self.assertAlmostEqual(safe_divide(0, 5), 0.0)

    def test_division_by_zero_default_zero(self):
        self.assertAlmostEqual(safe_divide(5, 0), 0.0)
        self.assertAlmostEqual(safe_divide(5, 1e-13), 0.0) # Denominator smaller than default epsilon
        self.assertAlmostEqual(safe_divide(0, 0), 0.0)

    def test_division_by_zero_custom_default(self):
        self.assertAlmostEqual(safe_divide(5, 0, default_on_zero_denom=99.0), 99.0)

    def test_large_magnitudes_are_not_treated_as_zero(self):
        # Areal rates are ~1e15 m^2/s
        self.assertAlmostEqual(safe_divide(3e15, 1.5e15), 2.0)

class TestNormalizeVector(unittest.TestCase):

    def test_normalize_typical_vector(self):
        np.testing.assert_array_almost_equal(normalize_vector(np.array([3.0, 0.0, 4.0])), [0.6, 0.0, 0.8])

    def test_normalize_zero_vector(self):
        np.testing.assert_array_almost_equal(normalize_vector(np.zeros(3)), np.zeros(3))

    def test_normalize_list_input(self):
        np.testing.assert_array_almost_equal(normalize_vector([0, 0, 5]), [0.0, 0.0, 1.0])

class TestOrientedTangent(unittest.TestCase):

    def test_tangent_is_unit_and_perpendicular(self):
        for theta in np.linspace(0, 2 * np.pi, 9):
            r = np.array([np.cos(theta), 0.0, np.sin(theta)]) * 1.5e11
            t = oriented_tangent(r)
            self.assertAlmostEqual(np.linalg.norm(t), 1.0)
            self.assertAlmostEqual(np.dot(t, r) / np.linalg.norm(r), 0.0)
            self.assertAlmostEqual(t[1], 0.0)

    def test_angular_momentum_points_up_for_every_direction(self):
        for theta in np.linspace(0, 2 * np.pi, 13):
            r = np.array([np.cos(theta), 0.0, np.sin(theta)])
            self.assertGreater(np.cross(r, oriented_tangent(r))[1], 0.0)

    def test_other_up_axis(self):
        r = np.array([1.0, 0.0, 0.0])
        t = oriented_tangent(r, up_axis=2)
        np.testing.assert_array_almost_equal(t, [0.0, 1.0, 0.0])

    def test_zero_radius_gives_zero_tangent(self):
        np.testing.assert_array_almost_equal(oriented_tangent(np.zeros(3)), np.zeros(3))

class TestArealRate(unittest.TestCase):

    def test_half_cross_product_magnitude(self):
        self.assertAlmostEqual(areal_rate([2.0, 0.0, 0.0], [0.0, 0.0, 3.0]), 3.0)

    def test_radial_motion_sweeps_no_area(self):
        self.assertAlmostEqual(areal_rate([2.0, 0.0, 0.0], [5.0, 0.0, 0.0]), 0.0)

class TestAsVector(unittest.TestCase):

    def test_copies_input(self):
        source = np.array([1.0, 2.0, 3.0])
        vector = as_vector(source)
        vector[0] = 10.0
        self.assertEqual(source[0], 1.0)

    def test_rejects_wrong_shape(self):
        with self.assertRaises(ValueError):
            as_vector([1.0, 2.0])

if __name__ == '__main__':
    unittest.main(argv=['first-arg-is-ignored'], exit=False)
