from __future__ import annotations

import unittest

from models import InvalidProfile
from weapon import (
    ARC_HEIGHT,
    DEFAULT_WEAPON_CATALOG,
    FIXED_SPEED,
    ArcHeightProfile,
    FixedSpeedProfile,
    profile_from_dict,
    profile_to_dict,
)


class TestProfiles(unittest.TestCase):
    def test_defaults(self):
        self.assertEqual(ArcHeightProfile().apex_height, 10.0)
        self.assertEqual(FixedSpeedProfile().initial_speed, 10.0)

    def test_arc_height_bounds(self):
        self.assertEqual(ArcHeightProfile(50.0).apex_height, 50.0)
        self.assertEqual(ArcHeightProfile(0.1).apex_height, 0.1)
        for bad in (0.0, -1.0, 50.01, float("nan"), float("inf")):
            with self.assertRaises(InvalidProfile):
                ArcHeightProfile(bad)

    def test_fixed_speed_bounds(self):
        self.assertEqual(FixedSpeedProfile(10.0).initial_speed, 10.0)
        self.assertEqual(FixedSpeedProfile(500).initial_speed, 500.0)
        for bad in (0.0, 9.99, 500.5, -20.0):
            with self.assertRaises(InvalidProfile):
                FixedSpeedProfile(bad)

    def test_non_numbers_rejected(self):
        with self.assertRaises(InvalidProfile):
            ArcHeightProfile("high")
        with self.assertRaises(InvalidProfile):
            FixedSpeedProfile(True)

    def test_invalid_profile_is_value_error(self):
        with self.assertRaises(ValueError):
            ArcHeightProfile(0.0)

    def test_profile_from_dict(self):
        p = profile_from_dict({"kind": "arc_height", "value": 12})
        self.assertEqual(p, ArcHeightProfile(12.0))
        p = profile_from_dict({"kind": " Fixed_Speed ", "value": "40"})
        self.assertEqual(p, FixedSpeedProfile(40.0))
        with self.assertRaises(InvalidProfile):
            profile_from_dict({"kind": "laser", "value": 1.0})
        with self.assertRaises(InvalidProfile):
            profile_from_dict({"kind": "arc_height"})

    def test_profile_to_dict(self):
        self.assertEqual(profile_to_dict(ArcHeightProfile(3.0)), {"kind": ARC_HEIGHT, "value": 3.0})
        self.assertEqual(profile_to_dict(FixedSpeedProfile(30.0)), {"kind": FIXED_SPEED, "value": 30.0})

    def test_profiles_are_hashable_values(self):
        self.assertEqual(len({ArcHeightProfile(5.0), ArcHeightProfile(5.0)}), 1)

    def test_catalog_holds_both_kinds(self):
        kinds = {w.profile.kind for w in DEFAULT_WEAPON_CATALOG.values()}
        self.assertEqual(kinds, {ARC_HEIGHT, FIXED_SPEED})
        self.assertIn("longbow", DEFAULT_WEAPON_CATALOG)


if __name__ == "__main__":
    unittest.main()
