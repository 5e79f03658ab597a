from __future__ import annotations

import math
import unittest

from config import LEVEL_BAND_M
from models import LaunchGeometry, LaunchSolution, OutOfRange, is_out_of_range
from solver import max_level_range, solve, solve_fixed_speed
from utils import Vector3
from weapon import FixedSpeedProfile

G = 9.8
GRAVITY = Vector3(0.0, -G, 0.0)


def _geom(origin, target) -> LaunchGeometry:
    return LaunchGeometry(origin=Vector3(*origin), target=Vector3(*target), gravity=GRAVITY)


class TestFixedSpeedSolver(unittest.TestCase):
    def assertHits(self, sol, target, delta: float = 1e-6):
        self.assertIsInstance(sol, LaunchSolution)
        self.assertLessEqual(sol.impact_point.distance(target), delta, f"{sol.impact_point} != {target}")

    def test_level_hits_target(self):
        for target in ((0, 0, 30), (30, 0, 40), (-25, 0, -10), (12, 0, 0)):
            geom = _geom((0, 0, 0), target)
            sol = solve(geom, FixedSpeedProfile(25.0))
            self.assertHits(sol, geom.target)

    def test_level_hits_target_off_origin(self):
        geom = _geom((5, 3, -7), (-10, 3, 20))
        self.assertHits(solve(geom, FixedSpeedProfile(40.0)), geom.target)

    def test_level_picks_low_arc(self):
        geom = _geom((0, 0, 0), (0, 0, 30))
        sol = solve(geom, FixedSpeedProfile(20.0))
        expected = math.degrees(math.asin(30.0 * G / 400.0) / 2.0)
        self.assertAlmostEqual(sol.elevation_deg, expected, places=9)
        self.assertLess(sol.elevation_deg, 45.0)

    def test_speed_is_preserved(self):
        geom = _geom((0, 0, 0), (30, -6, 40))
        sol = solve(geom, FixedSpeedProfile(35.0))
        self.assertAlmostEqual(sol.launch_speed, 35.0, places=9)

    def test_heading_points_at_target(self):
        geom = _geom((0, 0, 0), (30, 4, 40))
        sol = solve(geom, FixedSpeedProfile(50.0))
        flat = sol.initial_velocity.flattened().normalized()
        self.assertAlmostEqual(flat.x, 0.6, places=9)
        self.assertAlmostEqual(flat.z, 0.8, places=9)

    def test_level_out_of_range(self):
        outcome = solve(_geom((0, 0, 0), (0, 0, 1000)), FixedSpeedProfile(10.0))
        self.assertIsInstance(outcome, OutOfRange)
        self.assertTrue(is_out_of_range(outcome))
        self.assertEqual(outcome.mode, "fixed_speed")

    def test_below_hits_target(self):
        for origin, target in (((0, 10, 0), (20, 0, 15)), ((0, 3, 0), (-8, 0, 2)), ((0, 40, 0), (5, 0, 0))):
            geom = _geom(origin, target)
            self.assertHits(solve(geom, FixedSpeedProfile(30.0)), geom.target)

    def test_below_low_arc_near_line_of_sight_at_high_speed(self):
        geom = _geom((0, 10, 0), (10, 0, 0))
        sol = solve(geom, FixedSpeedProfile(500.0))
        self.assertAlmostEqual(sol.elevation_deg, -45.0, delta=0.1)

    def test_below_out_of_range(self):
        outcome = solve(_geom((0, 0, 0), (200, -10, 0)), FixedSpeedProfile(10.0))
        self.assertIsInstance(outcome, OutOfRange)

    def test_above_hits_target(self):
        for target in ((40, 5, 0), (0, 12, -30), (7, 0.5, 7)):
            geom = _geom((0, 0, 0), target)
            self.assertHits(solve(geom, FixedSpeedProfile(30.0)), geom.target)

    def test_above_picks_shallower_root(self):
        # roots for this shot sit near 20.5 and 76.7 degrees
        sol = solve(_geom((0, 0, 0), (40, 5, 0)), FixedSpeedProfile(30.0))
        self.assertGreater(sol.elevation_deg, 15.0)
        self.assertLess(sol.elevation_deg, 25.0)

    def test_above_out_of_range(self):
        outcome = solve(_geom((0, 0, 0), (5, 20, 0)), FixedSpeedProfile(10.0))
        self.assertIsInstance(outcome, OutOfRange)

    def test_branch_continuity_across_level_band(self):
        # The level branch ignores up to LEVEL_BAND_M of height difference, so
        # crossing the band edge moves the angle by about the angle the band
        # subtends at the target: atan(band / d). Closer targets jump more
        # (~1.15 deg at d=5); a root swap would jump by tens of degrees.
        profile = FixedSpeedProfile(25.0)
        for d in (5.0, 15.0, 30.0, 45.0):
            bound = 1.5 * math.degrees(math.atan(LEVEL_BAND_M / d))
            prev = None
            steps = 0
            for i in range(-60, 61):
                dy = i * 0.005
                sol = solve(_geom((0, 0, 0), (0, -dy, d)), profile)
                self.assertIsInstance(sol, LaunchSolution)
                angle = sol.elevation_deg
                if prev is not None:
                    self.assertLess(abs(angle - prev), bound, f"jump at d={d} dy={dy}")
                prev = angle
                steps += 1
            self.assertEqual(steps, 121)

    def test_huge_distances_are_out_of_range_not_errors(self):
        profile = FixedSpeedProfile(50.0)
        for target in ((1e200, -5, 0), (1e200, 0, 0), (1e200, 5, 0), (0, -5, 1e160), (-1e160, 5, 3)):
            outcome = solve(_geom((0, 0, 0), target), profile)
            self.assertIsInstance(outcome, OutOfRange, f"target={target}")

    def test_overflowing_vertical_drop_is_out_of_range(self):
        outcome = solve(_geom((0, 1e308, 0), (0, -1e308, 0)), FixedSpeedProfile(50.0))
        self.assertIsInstance(outcome, OutOfRange)

    def test_reachable_range_shrinks_with_speed(self):
        geom = _geom((0, 0, 0), (0, 0, 200))
        reachable = []
        for speed in range(100, 5, -5):
            outcome = solve(geom, FixedSpeedProfile(float(max(speed, 10))))
            reachable.append(not is_out_of_range(outcome))
        self.assertTrue(reachable[0])
        self.assertFalse(reachable[-1])
        first_miss = reachable.index(False)
        self.assertFalse(any(reachable[first_miss:]))

    def test_max_level_range(self):
        self.assertAlmostEqual(max_level_range(20.0, G), 400.0 / G)
        d = max_level_range(20.0, G) * 0.999
        self.assertIsInstance(solve(_geom((0, 0, 0), (0, 0, d)), FixedSpeedProfile(20.0)), LaunchSolution)
        d = max_level_range(20.0, G) * 1.001
        self.assertIsInstance(solve(_geom((0, 0, 0), (0, 0, d)), FixedSpeedProfile(20.0)), OutOfRange)

    def test_vertical_up(self):
        geom = _geom((2, 0, 2), (2, 5, 2))
        sol = solve_fixed_speed(geom, FixedSpeedProfile(20.0))
        self.assertEqual(sol.initial_velocity, Vector3(0.0, 20.0, 0.0))
        self.assertHits(sol, geom.target)

    def test_vertical_up_out_of_reach(self):
        outcome = solve(_geom((0, 0, 0), (0, 30, 0)), FixedSpeedProfile(20.0))
        self.assertIsInstance(outcome, OutOfRange)

    def test_vertical_down(self):
        geom = _geom((0, 10, 0), (0, 0, 0))
        sol = solve(geom, FixedSpeedProfile(20.0))
        self.assertEqual(sol.initial_velocity, Vector3(0.0, -20.0, 0.0))
        self.assertHits(sol, geom.target)

    def test_same_point_goes_up_and_back(self):
        geom = _geom((1, 1, 1), (1, 1, 1))
        sol = solve(geom, FixedSpeedProfile(20.0))
        self.assertAlmostEqual(sol.flight_time, 40.0 / G)
        self.assertHits(sol, geom.target)

    def test_idempotent(self):
        geom = _geom((0, 2, 0), (14, -3, 9))
        self.assertEqual(solve(geom, FixedSpeedProfile(33.0)), solve(geom, FixedSpeedProfile(33.0)))


if __name__ == "__main__":
    unittest.main()
