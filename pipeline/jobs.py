"""Background generation jobs on Redis Queue.

enqueue_generation() puts a run on the configured queue; the worker in
pipeline.worker executes run_generation_job() with its own AppContext.
"""

import logging
from typing import Optional, Dict, Any

from redis import Redis
from rq import Queue

from core.config_loader import AppConfig, load_config

logger = logging.getLogger(__name__)

DEFAULT_REDIS_URL = 'redis://localhost:6379/0'


def run_generation_job(
    listing_id: Optional[int] = None,
    prospect_id: Optional[int] = None,
    min_score: Optional[float] = None,
    user_id: Optional[int] = None,
    config_path: str = "config.yaml"
) -> Dict[str, Any]:
    """RQ entry point. Builds its own context so it can run in any worker process."""
    from core.app_context import AppContext
    from pipeline.runner import run_generation_pipeline

    ctx = AppContext.build(load_config(config_path))
    result = run_generation_pipeline(
        ctx,
        listing_id=listing_id,
        prospect_id=prospect_id,
        min_score=min_score,
        user_id=user_id,
    )
    return {
        'success': result.success,
        'created': result.created_count,
        'pages_abandoned': result.stats.pages_abandoned,
        'error': result.error,
        'execution_time': result.execution_time,
    }


def get_queue(config: AppConfig, connection: Optional[Redis] = None) -> Queue:
    if connection is None:
        connection = Redis.from_url(config.queue.redis_url or DEFAULT_REDIS_URL)
    return Queue(config.queue.queue_name, connection=connection)


def enqueue_generation(
    config: AppConfig,
    listing_id: Optional[int] = None,
    prospect_id: Optional[int] = None,
    min_score: Optional[float] = None,
    user_id: Optional[int] = None,
    queue: Optional[Queue] = None
):
    """Queue a generation run. Returns the RQ job."""
    queue = queue or get_queue(config)
    job = queue.enqueue(
        run_generation_job,
        kwargs={
            'listing_id': listing_id,
            'prospect_id': prospect_id,
            'min_score': min_score,
            'user_id': user_id,
        },
        job_timeout=config.queue.job_timeout_seconds,
    )
    logger.info(
        f"Queued generation job {job.id} on '{queue.name}' "
        f"(listing={listing_id or 'all'}, prospect={prospect_id or 'all'})"
    )
    return job
