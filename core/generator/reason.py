from core.scorer.models import ScoreBreakdown
from core.utils import format_score

BUDGET_FIT_THRESHOLD = 80.0
FULL_MATCH = 100.0
DEFAULT_REASON = 'overall fit'


def build_reason(breakdown: ScoreBreakdown) -> str:
    """Human-readable summary of the signals that matched, e.g. 'budget fit, area fit (score: 75)'."""
    reasons = []
    if breakdown.signals.get('budget', 0.0) >= BUDGET_FIT_THRESHOLD:
        reasons.append('budget fit')
    if breakdown.signals.get('category', 0.0) >= FULL_MATCH:
        reasons.append('category fit')
    if breakdown.signals.get('area', 0.0) >= FULL_MATCH:
        reasons.append('area fit')
    if breakdown.informational.get('yield', 0.0) >= FULL_MATCH:
        reasons.append('yield fit')

    if not reasons:
        reasons.append(DEFAULT_REASON)

    return f"{', '.join(reasons)} (score: {format_score(breakdown.total)})"
