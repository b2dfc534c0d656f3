# vehicles/base.py
import math
from dataclasses import dataclass


def wrap_angle(a):  # -> (-pi, pi]
    w = math.remainder(a, 2 * math.pi)
    return math.pi if w == -math.pi else w


@dataclass(frozen=True)
class Pose:
    """Simple pose container (meters, radians). Heading is not normalized."""
    x: float
    y: float
    theta: float


@dataclass(frozen=True)
class PathSample:
    """One simulated step along a clothoid: time, arc length, pose and curvature."""
    t: float
    s: float
    x: float
    y: float
    theta: float
    kappa: float

    @property
    def pose(self):
        return Pose(self.x, self.y, self.theta)
