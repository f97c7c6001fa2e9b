"""
Property-based tests for both scoring recipes.

Uses Hypothesis to check that scores are deterministic and bounded for
arbitrary listings and prospects, including malformed free text.
"""

import unittest

from hypothesis import given, settings, strategies as st

from core.scorer.detail import DetailRecipe
from core.scorer.generation import GenerationRecipe
from core.matcher.preference_matcher import PreferenceMatcher
from tests import make_listing, make_prospect, make_rule, fixed_clock

CATEGORIES = ['store', 'residential', 'land', 'office', 'unit', 'building', 'hotel']
REGIONS = ['Osaka', 'Tokyo', 'Kyoto', '大阪府', '東京都', '']
RULE_TYPES = ['area', 'transit', 'station', 'structure', 'age', 'yield', 'size', 'other', 'bogus']
PRIORITIES = ['must', 'want', 'nice_to_have', 'unknown']

optional_amount = st.one_of(st.none(), st.floats(min_value=0, max_value=100000, allow_nan=False))
optional_budget = st.one_of(st.none(), st.integers(min_value=0, max_value=1_000_000))
free_text = st.one_of(
    st.none(),
    st.text(max_size=40),
    st.sampled_from(['50坪', '30-50坪', '40 tsubo or more', '徒歩5分以内', 'walk ≤ 10 min', '築10年以内', '新築']),
)


@st.composite
def listings(draw):
    return make_listing(
        category=draw(st.sampled_from(CATEGORIES)),
        price=draw(st.integers(min_value=1, max_value=1_000_000)),
        land_area=draw(optional_amount),
        building_area=draw(optional_amount),
        yield_rate=draw(st.one_of(st.none(), st.floats(min_value=0, max_value=100, allow_nan=False))),
        region=draw(st.sampled_from(REGIONS)),
        locality=draw(st.sampled_from(['Kita-ku', '中央区', ''])),
        address=draw(st.text(max_size=20)),
        station_name=draw(st.one_of(st.none(), st.sampled_from(['Umeda', '梅田']))),
        walk_minutes=draw(st.one_of(st.none(), st.integers(min_value=0, max_value=60))),
        structure=draw(st.one_of(st.none(), st.sampled_from(['RC', 'SRC 10F', '木造']))),
        construction_year=draw(st.one_of(st.none(), st.integers(min_value=1950, max_value=2024))),
    )


@st.composite
def prospects(draw):
    rules = draw(st.lists(
        st.builds(
            make_rule,
            st.sampled_from(RULE_TYPES),
            st.one_of(st.text(max_size=30), free_text.filter(lambda t: t is not None)),
            st.sampled_from(PRIORITIES),
        ),
        max_size=5,
    ))
    return make_prospect(
        rules=rules,
        category_preference=draw(st.one_of(st.none(), st.just(''), st.lists(
            st.sampled_from(CATEGORIES), min_size=1, max_size=3).map(','.join))),
        budget_min=draw(optional_budget),
        budget_max=draw(optional_budget),
        area_preference=draw(st.one_of(st.none(), st.sampled_from(REGIONS), st.text(max_size=10))),
        yield_requirement=draw(st.one_of(st.none(), st.floats(min_value=0, max_value=100, allow_nan=False))),
        area_requirement=draw(optional_amount),
        remarks=draw(free_text),
        detailed_requirements=draw(free_text),
    )


class TestScoringProperties(unittest.TestCase):

    def setUp(self):
        matcher = PreferenceMatcher(clock=fixed_clock())
        self.generation = GenerationRecipe(preference_matcher=matcher)
        self.detail = DetailRecipe(preference_matcher=matcher)

    @settings(max_examples=200, deadline=None)
    @given(listing=listings(), prospect=prospects())
    def test_generation_score_is_bounded_and_deterministic(self, listing, prospect):
        first = self.generation.score(listing, prospect)
        second = self.generation.score(listing, prospect)

        self.assertEqual(first, second)
        self.assertGreaterEqual(first.total, 0.0)
        self.assertLessEqual(first.total, 100.0)
        for value in list(first.signals.values()) + list(first.informational.values()):
            self.assertGreaterEqual(value, 0.0)
            self.assertLessEqual(value, 100.0)

    @settings(max_examples=200, deadline=None)
    @given(listing=listings(), prospect=prospects())
    def test_detail_score_is_bounded_and_deterministic(self, listing, prospect):
        first = self.detail.score(listing, prospect)
        second = self.detail.score(listing, prospect)

        self.assertEqual(first, second)
        self.assertGreaterEqual(first.total, 0.0)
        self.assertLessEqual(first.total, 100.0)

    @settings(max_examples=200, deadline=None)
    @given(listing=listings(), prospect=prospects())
    def test_preference_rules_never_raise(self, listing, prospect):
        matcher = PreferenceMatcher(clock=fixed_clock())
        for rule in prospect.preference_rules:
            self.assertIn(matcher.matches(rule, listing), (True, False))


if __name__ == "__main__":
    unittest.main()
