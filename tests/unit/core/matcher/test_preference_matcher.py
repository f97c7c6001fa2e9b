#!/usr/bin/env python3
"""
Unit tests for preference rule evaluation.
"""

import unittest
from datetime import datetime, timezone

from core.matcher.models import PreferenceType, Priority
from core.matcher.preference_matcher import PreferenceMatcher, RULE_CHECKS
from tests import make_listing, make_rule, fixed_clock


class TestPreferenceVocabulary(unittest.TestCase):

    def test_every_type_has_a_check(self):
        self.assertEqual(set(RULE_CHECKS), set(PreferenceType))

    def test_parse(self):
        self.assertIs(PreferenceType.parse('transit'), PreferenceType.TRANSIT)
        self.assertIs(PreferenceType.parse('station'), PreferenceType.TRANSIT)
        self.assertIs(PreferenceType.parse(' AGE '), PreferenceType.AGE)
        self.assertIs(PreferenceType.parse('parking'), PreferenceType.OTHER)
        self.assertIs(PreferenceType.parse(None), PreferenceType.OTHER)

    def test_priority_weights(self):
        self.assertEqual(Priority.weight_of('must'), 3.0)
        self.assertEqual(Priority.weight_of('want'), 2.0)
        self.assertEqual(Priority.weight_of('nice_to_have'), 1.0)
        self.assertEqual(Priority.weight_of('whenever'), 1.0)


class TestRuleMatching(unittest.TestCase):

    def setUp(self):
        self.matcher = PreferenceMatcher(clock=fixed_clock(datetime(2024, 6, 1, tzinfo=timezone.utc)))

    def test_transit_walk_minutes(self):
        rule = make_rule('transit', 'walk ≤ 5 min')
        self.assertTrue(self.matcher.matches(rule, make_listing(walk_minutes=3)))
        self.assertFalse(self.matcher.matches(rule, make_listing(walk_minutes=8)))
        self.assertFalse(self.matcher.matches(rule, make_listing(walk_minutes=None)))

    def test_transit_station_name(self):
        rule = make_rule('station', 'Umeda')
        self.assertTrue(self.matcher.matches(rule, make_listing(station_name='Higashi-Umeda')))
        self.assertFalse(self.matcher.matches(rule, make_listing(station_name=None)))

    def test_area(self):
        rule = make_rule('area', 'Kita-ku')
        self.assertTrue(self.matcher.matches(rule, make_listing(region='Osaka', locality='Kita-ku')))
        self.assertFalse(self.matcher.matches(rule, make_listing(region='Osaka', locality='Chuo-ku')))

    def test_structure(self):
        rule = make_rule('structure', 'RC')
        self.assertTrue(self.matcher.matches(rule, make_listing(structure='RC 5F')))
        self.assertFalse(self.matcher.matches(rule, make_listing(structure=None)))

    def test_age_uses_injected_clock(self):
        rule = make_rule('age', '築10年以内')
        self.assertTrue(self.matcher.matches(rule, make_listing(construction_year=2014)))
        self.assertFalse(self.matcher.matches(rule, make_listing(construction_year=2013)))
        self.assertFalse(self.matcher.matches(rule, make_listing(construction_year=None)))

        later = PreferenceMatcher(clock=fixed_clock(datetime(2030, 1, 1, tzinfo=timezone.utc)))
        self.assertFalse(later.matches(rule, make_listing(construction_year=2014)))

    def test_age_new_build(self):
        rule = make_rule('age', '新築')
        self.assertTrue(self.matcher.matches(rule, make_listing(construction_year=2023)))
        self.assertFalse(self.matcher.matches(rule, make_listing(construction_year=2020)))

    def test_yield(self):
        rule = make_rule('yield', 'yield >= 6%')
        self.assertTrue(self.matcher.matches(rule, make_listing(yield_rate=6.5)))
        self.assertFalse(self.matcher.matches(rule, make_listing(yield_rate=5.0)))
        self.assertFalse(self.matcher.matches(rule, make_listing(yield_rate=None)))

    def test_size(self):
        land = make_rule('size', '土地面積100㎡以上')
        building = make_rule('size', 'building area >= 80 m2')
        listing = make_listing(land_area=120.0, building_area=60.0)
        self.assertTrue(self.matcher.matches(land, listing))
        self.assertFalse(self.matcher.matches(building, listing))

    def test_other_never_matches(self):
        self.assertFalse(self.matcher.matches(make_rule('other', 'pets allowed'), make_listing()))

    def test_malformed_values_do_not_match(self):
        listing = make_listing(walk_minutes=3, yield_rate=8.0, construction_year=2020)
        for rule_type in ('transit', 'age', 'yield', 'size'):
            self.assertFalse(self.matcher.matches(make_rule(rule_type, '???'), listing))
        self.assertFalse(self.matcher.matches(make_rule('area', '   '), listing))


class TestOtherConditionsScore(unittest.TestCase):

    def setUp(self):
        self.matcher = PreferenceMatcher(clock=fixed_clock())

    def test_no_rules_is_neutral(self):
        self.assertEqual(self.matcher.other_conditions_score([], make_listing()), 50.0)
        self.assertEqual(self.matcher.other_conditions_score(None, make_listing()), 50.0)

    def test_priority_weighting(self):
        listing = make_listing(structure='RC', walk_minutes=12)
        rules = [
            make_rule('structure', 'RC', 'must'),
            make_rule('transit', 'walk ≤ 5 min', 'want'),
            make_rule('other', 'quiet', 'nice_to_have'),
        ]
        self.assertEqual(self.matcher.other_conditions_score(rules, listing), 50.0)

    def test_all_matched(self):
        listing = make_listing(structure='RC', walk_minutes=2)
        rules = [make_rule('structure', 'RC', 'must'), make_rule('transit', 'walk ≤ 5 min', 'want')]
        self.assertEqual(self.matcher.other_conditions_score(rules, listing), 100.0)


if __name__ == "__main__":
    unittest.main()
