"""Shared generation pipeline runner module.

Runs one generation pass over the store and reports the outcome. Used by
main.py for scheduled and one-shot runs and by the RQ job in pipeline.jobs.
"""

import time
import logging
from typing import Optional
from dataclasses import dataclass, field

from core.app_context import AppContext
from core.exceptions import MatchingError
from core.generator import GenerationScope, GenerationStats


logger = logging.getLogger(__name__)


@dataclass
class GenerationPipelineResult:
    """Result of running the generation pipeline."""
    success: bool
    created_count: int
    stats: GenerationStats = field(default_factory=GenerationStats)
    error: Optional[str] = None
    execution_time: float = 0.0


def run_generation_pipeline(
    ctx: AppContext,
    listing_id: Optional[int] = None,
    prospect_id: Optional[int] = None,
    min_score: Optional[float] = None,
    user_id: Optional[int] = None
) -> GenerationPipelineResult:
    """Run match generation as a self-contained operation.

    Args:
        ctx: Application context with config and wired services
        listing_id: Restrict the run to one listing
        prospect_id: Restrict the run to one prospect
        min_score: Threshold override; defaults to generation.min_score
        user_id: Recorded as creator on new matches and activity events

    Returns:
        GenerationPipelineResult with success status and counts
    """
    pipeline_start = time.time()

    logger.info("=" * 60)
    logger.info("STARTING GENERATION PIPELINE")
    logger.info("=" * 60)

    try:
        stats = ctx.generator.run(
            scope=GenerationScope(listing_id=listing_id, prospect_id=prospect_id),
            min_score=min_score,
            user_id=user_id,
        )
    except MatchingError as e:
        elapsed = time.time() - pipeline_start
        logger.error(f"Generation pipeline failed after {elapsed:.2f}s: {e}", exc_info=True)
        return GenerationPipelineResult(
            success=False,
            created_count=0,
            error=str(e),
            execution_time=elapsed
        )

    elapsed = time.time() - pipeline_start
    logger.info("=" * 60)
    logger.info(f"GENERATION PIPELINE COMPLETED: {stats.created} match(es) in {elapsed:.2f}s")
    logger.info("=" * 60)

    return GenerationPipelineResult(
        success=not stats.pages_abandoned,
        created_count=stats.created,
        stats=stats,
        error=f"{stats.pages_abandoned} page(s) abandoned" if stats.pages_abandoned else None,
        execution_time=elapsed
    )
