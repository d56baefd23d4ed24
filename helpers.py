# helpers.py

import numpy as np


def calculate_angle(a, b, c):
    """Calculates the interior angle at b (degrees, 0..180) between three points."""
    a = np.array(a)
    b = np.array(b)
    c = np.array(c)

    radians = np.arctan2(c[1] - b[1], c[0] - b[0]) - np.arctan2(a[1] - b[1], a[0] - b[0])
    angle = np.abs(radians * 180.0 / np.pi)

    if angle > 180.0:
        angle = 360 - angle

    return float(angle)


def calculate_distance(p1, p2):
    """Calculates the Euclidean distance between two points."""
    return float(np.linalg.norm(np.array(p1) - np.array(p2)))


def midpoint(p1, p2):
    return (p1[0] + p2[0]) / 2.0, (p1[1] + p2[1]) / 2.0


def xy(landmark):
    """Drops depth/visibility so a landmark can be fed to the helpers above."""
    return landmark.x, landmark.y
