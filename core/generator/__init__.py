"""Generator Module - bulk pair generation."""
from core.generator.models import GenerationScope, GenerationStats
from core.generator.reason import build_reason
from core.generator.service import PairGenerator

__all__ = ['PairGenerator', 'GenerationScope', 'GenerationStats', 'build_reason']
