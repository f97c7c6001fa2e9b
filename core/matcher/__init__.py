"""Matcher Module - structured preference rules and free-text extraction."""
from core.matcher.models import PreferenceType, Priority, PRIORITY_WEIGHTS
from core.matcher.extraction import Extraction, NO_MATCH, extract_quantity, extract_tsubo_requirement
from core.matcher.preference_matcher import PreferenceMatcher, RULE_CHECKS

__all__ = [
    'PreferenceMatcher', 'RULE_CHECKS',
    'PreferenceType', 'Priority', 'PRIORITY_WEIGHTS',
    'Extraction', 'NO_MATCH', 'extract_quantity', 'extract_tsubo_requirement',
]
