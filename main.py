import time
import logging
import signal
import argparse

from core.app_context import AppContext
from core.config_loader import load_config
from database.init_db import init_db
from pipeline.jobs import enqueue_generation
from pipeline.runner import run_generation_pipeline

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Global flag for graceful shutdown
running = True
_ctx = None


def signal_handler(sig, frame):
    global running
    logger.info("Shutdown signal received")
    running = False
    # A run in progress stops at its next page boundary
    if _ctx is not None:
        _ctx.cancel_event.set()


def run_cycle(ctx: AppContext, args) -> None:
    cycle_start = time.time()

    if args.enqueue or ctx.config.queue.enabled:
        enqueue_generation(
            ctx.config,
            listing_id=args.listing_id,
            prospect_id=args.prospect_id,
            min_score=args.min_score,
        )
    else:
        result = run_generation_pipeline(
            ctx,
            listing_id=args.listing_id,
            prospect_id=args.prospect_id,
            min_score=args.min_score,
        )
        if not result.success:
            logger.warning(f"Generation finished with errors: {result.error}")

    cycle_elapsed = time.time() - cycle_start
    logger.info(f"=== Cycle Completed in {cycle_elapsed:.2f}s ===")


def main():
    global _ctx

    parser = argparse.ArgumentParser(description="Property matchmaker driver")
    parser.add_argument('--config', default='config.yaml', help='Path to config.yaml')
    parser.add_argument('--once', action='store_true', help='Run a single generation pass and exit')
    parser.add_argument('--enqueue', action='store_true', help='Queue the run on RQ instead of running inline (also when queue.enabled is set)')
    parser.add_argument('--listing-id', type=int, default=None)
    parser.add_argument('--prospect-id', type=int, default=None)
    parser.add_argument('--min-score', type=float, default=None)
    args = parser.parse_args()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    config = load_config(args.config)
    if args.min_score is not None and not 0 <= args.min_score <= 100:
        parser.error("--min-score must be within 0-100")

    _ctx = AppContext.build(config)

    # Initialize DB (with retry logic)
    init_db()

    if args.once:
        run_cycle(_ctx, args)
        return

    interval = config.schedule.interval_seconds
    cycle_count = 0
    while running:
        cycle_count += 1
        logger.info(f"=== Starting Cycle #{cycle_count} ===")
        try:
            run_cycle(_ctx, args)
        except Exception as e:
            logger.error(f"Error in main loop: {e}", exc_info=True)

        if running:
            logger.info(f"=== Cycle #{cycle_count} done. Sleeping for {interval} seconds... ===")
            # Sleep in chunks to allow responsive shutdown
            for _ in range(max(1, interval // 5)):
                if not running:
                    break
                time.sleep(5)


if __name__ == "__main__":
    main()
