# geom/clothoid.py
"""
G1 Hermite interpolation with a single clothoid segment.

Given two poses, find the clothoid (curvature linear in arc length) that
leaves the first pose and reaches the second one with matching heading.
Working in the frame of the chord P0 -> P1, with phi0/phi1 the start/end
headings relative to the chord and delta = phi1 - phi0, the unknown curvature
rate is folded into one scalar A:

    kappa0 = (delta - A) / L,   dkappa = 2 A / L^2

The end point lies on the chord iff Y_0(2A, delta - A, phi0) == 0, which is
solved for A with Newton's method; the length then follows from
L = |P1 - P0| / X_0(2A, delta - A, phi0).
"""
import math
from dataclasses import dataclass, field

from geom.fresnel import generalized_fresnel_cs
from vehicles.base import Pose, wrap_angle

FIT_TOLERANCE = 1e-12        # on Y_0, i.e. lateral miss relative to the chord
MAX_FIT_ITERATIONS = 100     # per seed

# Fitted polynomial in (phi0/pi, phi1/pi) giving a starting A close to the root
_GUESS_COEFFS = (2.989696028701907, 0.716228953608281, -0.458969738821509,
                 -0.502821153340377, 0.261062141752652, -0.045854475238709)


class ClothoidError(Exception):
    """Base class for clothoid fitting/evaluation errors."""


class FitNonConvergence(ClothoidError):
    """The G1 root finder did not reach the requested tolerance."""


class InvalidEvaluationRange(ClothoidError, ValueError):
    """evaluate() was asked for an arc length outside [0, L]."""


@dataclass(frozen=True)
class ClothoidSegment:
    x0: float
    y0: float
    theta0: float
    kappa0: float
    dkappa: float
    length: float
    iterations: int = field(default=0, compare=False)

    @property
    def start(self):
        return Pose(self.x0, self.y0, self.theta0)

    @property
    def end(self):
        x, y, th, _ = evaluate(self, self.length)
        return Pose(x, y, th)

    def theta(self, s):
        return self.theta0 + s * (self.kappa0 + 0.5 * self.dkappa * s)

    def kappa(self, s):
        return self.kappa0 + self.dkappa * s

    def evaluate(self, s):
        return evaluate(self, s)


def evaluate(segment, s):
    """
    Pose and curvature at arc length s along the segment.

    s must satisfy 0 <= s <= segment.length; anything else (NaN included)
    raises InvalidEvaluationRange instead of extrapolating.
    Returns (x, y, theta, kappa).
    """
    if not 0.0 <= s <= segment.length:
        raise InvalidEvaluationRange(
            f"arc length {s} outside [0, {segment.length}]")
    C, S = generalized_fresnel_cs(1, segment.dkappa * s * s,
                                  segment.kappa0 * s, segment.theta0)
    return (segment.x0 + s * C[0],
            segment.y0 + s * S[0],
            segment.theta(s),
            segment.kappa(s))


def _initial_guess(phi0, phi1):
    c0, c1, c2, c3, c4, c5 = _GUESS_COEFFS
    X = phi0 / math.pi
    Y = phi1 / math.pi
    xy = X * Y
    X *= X
    Y *= Y
    return (phi0 + phi1) * (c0 + xy * (c1 + xy * c2)
                            + (c3 + xy * c4) * (X + Y)
                            + c5 * (X * X + Y * Y))


def _newton(A, phi0, delta, tolerance, max_iterations):
    """Return (A, iterations) on convergence, None otherwise."""
    for it in range(1, max_iterations + 1):
        C, S = generalized_fresnel_cs(3, 2 * A, delta - A, phi0)
        f = S[0]
        if abs(f) < tolerance:
            # the other roots make the curve run away from the chord (X_0 <= 0)
            return (A, it) if C[0] > 0 else None
        df = C[2] - C[1]
        if df == 0.0:
            return None
        A -= f / df
        if not math.isfinite(A):
            return None
    return None


def build_g1(x0, y0, theta0, x1, y1, theta1,
             tolerance=FIT_TOLERANCE, max_iterations=MAX_FIT_ITERATIONS):
    """
    Fit the clothoid from (x0, y0, theta0) to (x1, y1, theta1).

    Relative headings are wrapped to (-pi, pi] (exact -pi becomes +pi), so the
    total turn of the fitted curve, theta(L) - theta0, lies in (-2pi, 2pi) and
    matches theta1 modulo 2pi.

    Identical start and end poses yield a zero-length segment. Raises
    FitNonConvergence when Newton fails from every seed, when the two
    points coincide but the headings do not, or when the chord is so short
    that the curvature rate overflows.
    """
    dx = x1 - x0
    dy = y1 - y0
    r = math.hypot(dx, dy)
    if r == 0.0:
        if wrap_angle(theta1 - theta0) == 0.0:
            return ClothoidSegment(x0, y0, theta0, 0.0, 0.0, 0.0)
        raise FitNonConvergence(
            f"coincident points ({x0}, {y0}) with headings {theta0} != {theta1}")

    phi = math.atan2(dy, dx)
    phi0 = wrap_angle(theta0 - phi)
    phi1 = wrap_angle(theta1 - phi)
    delta = phi1 - phi0

    for seed in (_initial_guess(phi0, phi1), 0.0):
        res = _newton(seed, phi0, delta, tolerance, max_iterations)
        if res is not None:
            break
    else:
        raise FitNonConvergence(
            f"no G1 clothoid within {max_iterations} iterations for "
            f"phi0={phi0:.6f}, phi1={phi1:.6f}, chord={r:.6g}")

    A, iterations = res
    C, _ = generalized_fresnel_cs(1, 2 * A, delta - A, phi0)
    L = r / C[0]
    # divide twice: L * L underflows to 0 for chords below ~1e-154
    kappa0 = (delta - A) / L
    dkappa = 2 * A / L / L
    if not (math.isfinite(kappa0) and math.isfinite(dkappa)):
        raise FitNonConvergence(
            f"chord {r:.6g} too short to represent curvature "
            f"(kappa0={kappa0}, dkappa={dkappa})")
    return ClothoidSegment(x0, y0, theta0,
                           kappa0=kappa0,
                           dkappa=dkappa,
                           length=L,
                           iterations=iterations)
