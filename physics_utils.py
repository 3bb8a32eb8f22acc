# physics_utils.py

import numpy as np

class PhysicsError(Exception):
    """Custom exception for physically impossible requests (e.g. a constraint bound to itself)."""
    pass

def as_vector(value):
    """Returns a fresh float64 copy of a 3-component vector."""
    vector = np.array(value, dtype=np.float64)
    if vector.shape != (3,):
        raise ValueError(f"Expected a 3-component vector, got shape {vector.shape}.")
    return vector

def safe_divide(numerator, denominator, epsilon=1e-12, default_on_zero_denom=0.0):
    """
    Safely divides two scalars, handling potential division by zero.

    Args:
        numerator (float): The number to be divided.
        denominator (float): The number to divide by.
        epsilon (float): Threshold below which the denominator is considered zero.
        default_on_zero_denom (float): Value to return if denominator is effectively zero.

    Returns:
        float: The result of the division, or default_on_zero_denom if denominator is near zero.
    """
    if abs(denominator) < epsilon:
        return default_on_zero_denom
    return numerator / denominator

def normalize_vector(vector, epsilon=1e-12):
    """
    Normalizes a vector to unit length.

    Args:
        vector (np.ndarray): The vector to normalize.
        epsilon (float): Threshold below which the vector's magnitude is considered zero.

    Returns:
        np.ndarray: The normalized vector, or a zero vector if its magnitude is close to zero.
    """
    if not isinstance(vector, np.ndarray):
        vector = np.array(vector, dtype=float)

    norm = np.linalg.norm(vector)
    if norm < epsilon:
        return np.zeros_like(vector)
    return vector / norm

def oriented_tangent(radius_vector, up_axis=1):
    """
    Unit vector perpendicular to `radius_vector` inside the orbital plane normal to `up_axis`.

    The sign is chosen so that `radius_vector x tangent` points along +up_axis;
    every orbit built with this helper therefore turns in the same sense.

    Args:
        radius_vector (np.ndarray): Position relative to the attracting body.
        up_axis (int): Index of the shared orbital-plane normal (0, 1 or 2).

    Returns:
        np.ndarray: Unit tangent, or a zero vector for a zero radius.
    """
    up = np.zeros(3)
    up[up_axis] = 1.0
    tangent = normalize_vector(np.cross(up, radius_vector))
    if np.cross(radius_vector, tangent)[up_axis] < 0:
        tangent = -tangent
    return tangent

def areal_rate(position, velocity):
    """Specific areal velocity 0.5*|r x v| (constant for an unperturbed two-body orbit)."""
    return 0.5 * float(np.linalg.norm(np.cross(position, velocity)))
