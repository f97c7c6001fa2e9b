#!/usr/bin/env python3
"""
Unit tests for the detail-view scoring recipe.
"""

import unittest

from core.scorer.detail import (
    DetailRecipe,
    budget_score,
    area_score,
    category_score,
    size_score,
    yield_score,
)
from core.scorer.generation import GenerationRecipe
from tests import make_listing, make_prospect


class TestDetailSubScores(unittest.TestCase):

    def test_budget_steps(self):
        self.assertEqual(budget_score(8000, 5000, 10000), 1.0)
        self.assertEqual(budget_score(10000, 5000, 10000), 1.0)
        self.assertEqual(budget_score(10500, 5000, 10000), 0.8)
        self.assertEqual(budget_score(11500, 5000, 10000), 0.6)
        self.assertEqual(budget_score(12500, 5000, 10000), 0.4)
        self.assertEqual(budget_score(14000, 5000, 10000), 0.0)

    def test_budget_at_or_below_min(self):
        self.assertEqual(budget_score(4000, 5000, 10000), 0.3)
        # The lower bound is checked first, so equality is not a fit
        self.assertEqual(budget_score(5000, 5000, 10000), 0.3)

    def test_budget_requires_both_bounds(self):
        self.assertEqual(budget_score(8000, None, 10000), 0.5)
        self.assertEqual(budget_score(8000, 5000, None), 0.5)
        self.assertEqual(budget_score(None, 5000, 10000), 0.5)

    def test_area_is_exact(self):
        self.assertEqual(area_score('Osaka', 'Osaka'), 1.0)
        self.assertEqual(area_score('Osaka', 'Osaka, Kyoto'), 0.0)
        self.assertEqual(area_score('Osaka', None), 0.5)

    def test_category_is_exact(self):
        self.assertEqual(category_score('store', 'store'), 1.0)
        self.assertEqual(category_score('store', 'store,office'), 0.0)
        self.assertEqual(category_score('store', ''), 0.5)

    def test_size_ratio_bands(self):
        self.assertEqual(size_score(100, 100), 1.0)
        self.assertEqual(size_score(70, 100), 0.8)
        self.assertEqual(size_score(130, 100), 0.8)
        self.assertEqual(size_score(50, 100), 0.6)
        self.assertEqual(size_score(170, 100), 0.4)
        self.assertEqual(size_score(10, 100), 0.0)
        self.assertEqual(size_score(None, 100), 0.5)

    def test_yield_steps(self):
        self.assertEqual(yield_score(8.0, 8.0), 1.0)
        self.assertEqual(yield_score(7.5, 8.0), 0.8)
        self.assertEqual(yield_score(6.5, 8.0), 0.6)
        self.assertEqual(yield_score(5.7, 8.0), 0.4)
        self.assertEqual(yield_score(4.0, 8.0), 0.0)
        self.assertEqual(yield_score(None, 8.0), 0.5)


class TestDetailRecipe(unittest.TestCase):

    def setUp(self):
        self.recipe = DetailRecipe()

    def test_perfect_pair(self):
        listing = make_listing(category='store', price=8000, region='Osaka', building_area=100.0, yield_rate=8.0)
        prospect = make_prospect(
            category_preference='store',
            area_preference='Osaka',
            area_requirement=100.0,
            yield_requirement=7.0,
        )
        breakdown = self.recipe.score(listing, prospect)
        self.assertEqual(breakdown.total, 100.0)
        self.assertEqual(breakdown.signals['type'], 100.0)

    def test_all_missing_is_fifty(self):
        listing = make_listing(category='store', price=8000, region='Osaka')
        prospect = make_prospect(
            category_preference=None,
            area_preference=None,
            budget_min=None,
            budget_max=None,
        )
        self.assertEqual(self.recipe.score(listing, prospect).total, 50.0)

    def test_weighted_total(self):
        # budget 1.0*30 + area 0*25 + type 0.5*20 + size 0.5*15 + yield 0.5*10
        listing = make_listing(category='store', price=8000, region='Osaka')
        prospect = make_prospect(category_preference=None, area_preference='Kyoto')
        self.assertEqual(self.recipe.score(listing, prospect).total, 52.5)

    def test_differs_from_generation_recipe(self):
        """Multi-category preferences are a fit for generation but not for the detail view."""
        listing = make_listing(category='store', price=8000, region='Osaka')
        prospect = make_prospect(category_preference='store,office', area_preference='Osaka')

        generation = GenerationRecipe().score(listing, prospect)
        detail = self.recipe.score(listing, prospect)

        self.assertEqual(generation.signals['category'], 100.0)
        self.assertEqual(detail.signals['type'], 0.0)

    def test_to_dict_keys(self):
        data = self.recipe.score(make_listing(), make_prospect()).to_dict()
        for key in ('budget_score', 'area_score', 'type_score', 'size_score', 'yield_score', 'total_score'):
            self.assertIn(key, data)
        self.assertIn('other_conditions', data['informational'])


if __name__ == "__main__":
    unittest.main()
