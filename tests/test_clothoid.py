import dataclasses
import math
import unittest

import numpy as np

from geom.clothoid import (build_g1, evaluate, ClothoidSegment,
                           FitNonConvergence, InvalidEvaluationRange)
from vehicles.base import Pose, wrap_angle

try:
    from pyclothoids import Clothoid
    HAVE_PYCLOTHOIDS = True
except ImportError:
    HAVE_PYCLOTHOIDS = False

POS_TOL = 1e-8
HEADING_TOL = 1e-6

POSE_PAIRS = [
    ((2.0, 0.5, math.pi / 4), (5.0, 3.0, -math.pi / 6)),
    ((0.0, 0.0, 0.0), (10.0, 3.0, 0.5)),
    ((1.0, 1.0, 1.0), (-2.0, 4.0, 2.5)),
    ((0.0, 0.0, -2.0), (3.0, -1.0, 1.0)),
    ((5.0, 5.0, 3.0), (0.0, 0.0, -3.0)),
    ((0.0, 0.0, 0.0), (0.0, 5.0, math.pi)),
    ((-1.0, 2.0, 0.3), (4.0, 2.0, 0.3)),
    ((0.0, 0.0, 0.2), (1e-3, 2e-4, 0.1)),
    ((100.0, -50.0, 7.0), (140.0, -20.0, -9.5)),
]


class TestWrapAngle(unittest.TestCase):
    def test_range_and_tie_break(self):
        self.assertEqual(wrap_angle(math.pi), math.pi)
        self.assertEqual(wrap_angle(-math.pi), math.pi)
        self.assertEqual(wrap_angle(0.0), 0.0)
        self.assertAlmostEqual(wrap_angle(0.5 + 4 * math.pi), 0.5, places=12)
        self.assertAlmostEqual(wrap_angle(-0.5 - 6 * math.pi), -0.5, places=12)
        for a in np.linspace(-20.0, 20.0, 301):
            w = wrap_angle(float(a))
            self.assertTrue(-math.pi < w <= math.pi)


class TestBuildG1(unittest.TestCase):
    def assertPoseClose(self, got, want):
        x, y, th = got
        self.assertLess(abs(x - want[0]), POS_TOL)
        self.assertLess(abs(y - want[1]), POS_TOL)
        self.assertLess(abs(wrap_angle(th - want[2])), HEADING_TOL)

    def test_endpoints_reproduced(self):
        for start, end in POSE_PAIRS:
            with self.subTest(start=start, end=end):
                seg = build_g1(*start, *end)
                self.assertTrue(math.isfinite(seg.length) and seg.length > 0)
                self.assertPoseClose(evaluate(seg, 0.0)[:3], start)
                self.assertPoseClose(evaluate(seg, seg.length)[:3], end)

    def test_scenario_converges(self):
        seg = build_g1(2.0, 0.5, math.pi / 4, 5.0, 3.0, -math.pi / 6)
        self.assertGreaterEqual(seg.iterations, 1)
        self.assertGreater(seg.length, math.hypot(3.0, 2.5))   # longer than the chord
        self.assertEqual(seg.start, Pose(2.0, 0.5, math.pi / 4))
        end = seg.end
        self.assertLess(math.hypot(end.x - 5.0, end.y - 3.0), POS_TOL)
        self.assertLess(abs(wrap_angle(end.theta + math.pi / 6)), HEADING_TOL)

    def test_straight_line(self):
        seg = build_g1(0.0, 0.0, 0.0, 5.0, 0.0, 0.0)
        self.assertEqual(seg.kappa0, 0.0)
        self.assertEqual(seg.dkappa, 0.0)
        self.assertAlmostEqual(seg.length, 5.0, places=12)
        x, y, th, k = evaluate(seg, 2.5)
        self.assertAlmostEqual(x, 2.5, places=12)
        self.assertAlmostEqual(y, 0.0, places=12)
        self.assertEqual(th, 0.0)
        self.assertEqual(k, 0.0)

    def test_semicircle(self):
        seg = build_g1(1.0, 0.0, math.pi / 2, -1.0, 0.0, -math.pi / 2)
        self.assertAlmostEqual(seg.length, math.pi, places=10)
        self.assertAlmostEqual(seg.kappa0, 1.0, places=10)
        self.assertAlmostEqual(seg.dkappa, 0.0, places=10)
        x, y, th, _ = evaluate(seg, seg.length / 2)
        self.assertAlmostEqual(x, 0.0, places=9)
        self.assertAlmostEqual(y, 1.0, places=9)
        self.assertAlmostEqual(th, math.pi, places=9)

    def test_degenerate_identical_poses(self):
        seg = build_g1(1.0, 2.0, 0.3, 1.0, 2.0, 0.3)
        self.assertEqual(seg.length, 0.0)
        self.assertEqual(evaluate(seg, 0.0), (1.0, 2.0, 0.3, 0.0))

    def test_tiny_chords(self):
        seg = build_g1(0.0, 0.0, 0.0, 1e-300, 0.0, 0.0)
        self.assertEqual((seg.kappa0, seg.dkappa), (0.0, 0.0))
        self.assertEqual(seg.length, 1e-300)
        self.assertPoseClose(evaluate(seg, seg.length)[:3], (1e-300, 0.0, 0.0))
        # symmetric turn: circular arc, curvature still representable
        seg = build_g1(0.0, 0.0, 0.3, 1e-170, 0.0, -0.3)
        self.assertTrue(math.isfinite(seg.kappa0))
        self.assertEqual(seg.dkappa, 0.0)
        self.assertPoseClose(evaluate(seg, seg.length)[:3], (1e-170, 0.0, -0.3))
        # asymmetric turn: curvature rate ~ 1/L^2 overflows
        with self.assertRaises(FitNonConvergence):
            build_g1(0.0, 0.0, 0.3, 1e-170, 0.0, -0.9)

    def test_coincident_points_with_different_headings(self):
        with self.assertRaises(FitNonConvergence):
            build_g1(1.0, 2.0, 0.3, 1.0, 2.0, 1.3)

    def test_iteration_budget_is_enforced(self):
        with self.assertRaises(FitNonConvergence):
            build_g1(2.0, 0.5, math.pi / 4, 5.0, 3.0, -math.pi / 6, max_iterations=1)

    def test_heading_offsets_of_two_pi_give_same_curve(self):
        a = build_g1(0.0, 0.0, 0.4, 3.0, 1.0, -0.2)
        b = build_g1(0.0, 0.0, 0.4 + 2 * math.pi, 3.0, 1.0, -0.2 - 4 * math.pi)
        self.assertAlmostEqual(a.length, b.length, places=9)
        self.assertAlmostEqual(a.kappa0, b.kappa0, places=9)
        self.assertAlmostEqual(a.dkappa, b.dkappa, places=9)

    def test_segment_is_immutable(self):
        seg = build_g1(0.0, 0.0, 0.0, 5.0, 0.0, 0.0)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            seg.length = 1.0


class TestEvaluate(unittest.TestCase):
    def setUp(self):
        self.seg = build_g1(2.0, 0.5, math.pi / 4, 5.0, 3.0, -math.pi / 6)

    def test_curvature_is_linear(self):
        L = self.seg.length
        s1, s2, s3 = 0.1 * L, 0.45 * L, 0.9 * L
        k1, k2, k3 = (evaluate(self.seg, s)[3] for s in (s1, s2, s3))
        on_line = k1 + (k3 - k1) * (s2 - s1) / (s3 - s1)
        self.assertAlmostEqual(k2, on_line, places=10)

    def test_heading_is_integral_of_curvature(self):
        seg = self.seg
        th0 = evaluate(seg, 0.0)[2]
        for s in np.linspace(0.0, seg.length, 17):
            th = evaluate(seg, float(s))[2]
            self.assertAlmostEqual(th - th0, seg.kappa0 * s + 0.5 * seg.dkappa * s * s, places=10)

    def test_position_follows_heading(self):
        seg, h = self.seg, 1e-5
        for s in np.linspace(0.1, seg.length - 0.1, 9):
            s = float(s)
            xa, ya, _, _ = evaluate(seg, s - h)
            xb, yb, _, _ = evaluate(seg, s + h)
            th = evaluate(seg, s)[2]
            self.assertAlmostEqual((xb - xa) / (2 * h), math.cos(th), places=6)
            self.assertAlmostEqual((yb - ya) / (2 * h), math.sin(th), places=6)

    def test_out_of_range_is_rejected(self):
        for s in (-1e-9, self.seg.length + 1e-9, float('nan')):
            with self.assertRaises(InvalidEvaluationRange):
                evaluate(self.seg, s)
        with self.assertRaises(ValueError):
            self.seg.evaluate(-1.0)

    def test_method_matches_function(self):
        s = 0.3 * self.seg.length
        self.assertEqual(self.seg.evaluate(s), evaluate(self.seg, s))
        self.assertEqual(self.seg.kappa(s), evaluate(self.seg, s)[3])

    def test_zero_length_segment(self):
        seg = ClothoidSegment(3.0, -1.0, 2.0, 0.0, 0.0, 0.0)
        self.assertEqual(evaluate(seg, 0.0), (3.0, -1.0, 2.0, 0.0))
        with self.assertRaises(InvalidEvaluationRange):
            evaluate(seg, 1e-12)


@unittest.skipUnless(HAVE_PYCLOTHOIDS, "pyclothoids not installed")
class TestAgainstPyclothoids(unittest.TestCase):
    def assertRelClose(self, got, want, rel=1e-8):
        self.assertLessEqual(abs(got - want), rel * max(1.0, abs(want)))

    def test_matches_g1_hermite(self):
        for start, end in POSE_PAIRS:
            with self.subTest(start=start, end=end):
                seg = build_g1(*start, *end)
                ref = Clothoid.G1Hermite(*start, *end)
                self.assertRelClose(seg.length, ref.length)
                self.assertRelClose(seg.kappa0, ref.KappaStart)
                self.assertRelClose(seg.dkappa, ref.dk)


if __name__ == '__main__':
    unittest.main()
