import unittest

from core.generator import build_reason
from core.scorer.models import ScoreBreakdown


def breakdown(total, informational=None, **signals):
    return ScoreBreakdown(recipe='generation', total=total, signals=signals, informational=informational or {})


class TestBuildReason(unittest.TestCase):

    def test_all_fits(self):
        reason = build_reason(breakdown(
            95.0, informational={'yield': 100.0}, budget=100.0, category=100.0, area=100.0, size=80.0
        ))
        self.assertEqual(reason, 'budget fit, category fit, area fit, yield fit (score: 95)')

    def test_partial_budget_still_counts(self):
        reason = build_reason(breakdown(64.0, budget=80.0, category=50.0, area=0.0, size=30.0))
        self.assertEqual(reason, 'budget fit (score: 64)')

    def test_default_reason(self):
        reason = build_reason(breakdown(61.25, budget=50.0, category=50.0, area=50.0, size=50.0))
        self.assertEqual(reason, 'overall fit (score: 61.25)')


if __name__ == "__main__":
    unittest.main()
