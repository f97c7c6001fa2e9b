#!/usr/bin/env python3
"""
Scoring Models - Data structures for scoring results.
"""

from typing import Dict, Any
from dataclasses import dataclass, field


@dataclass
class ScoreBreakdown:
    """Result of scoring one (listing, prospect) pair with one recipe.

    `signals` carries the weighted sub-scores on a 0-100 scale;
    `informational` carries signals reported alongside but not weighted.
    """
    recipe: str
    total: float
    signals: Dict[str, float] = field(default_factory=dict)
    weights: Dict[str, float] = field(default_factory=dict)
    informational: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'recipe': self.recipe,
            'total_score': self.total,
        }
        for name, value in self.signals.items():
            data[f"{name}_score"] = value
        data['weights'] = dict(self.weights)
        if self.informational:
            data['informational'] = dict(self.informational)
        return data
