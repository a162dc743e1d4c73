"""Main entry point for the lazy sequence demonstrations."""

import logging
import sys
import time
from typing import List

import pandas as pd

from .config import get_demo_config
from .demos import run_all
from .models import DemoResult
from .sinks import ConsoleSink, EventLog, LoggingSink, TeeSink

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging level.

    Args:
        verbose: Enable verbose logging
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.INFO)


def print_summary(results: List[DemoResult], event_log: EventLog, elapsed: float):
    """Print summary statistics.

    Args:
        results: One result per demo, in run order
        event_log: Every traversal event observed during the run
        elapsed: Total wall-clock time of the run
    """
    print("\n" + "=" * 80)
    print("EXECUTION SUMMARY")
    print("=" * 80)

    print("\nDemos:")
    demos = pd.DataFrame([result.to_dict() for result in results])
    print(demos.to_string(index=False))

    print("\nTraversal events:")
    events = event_log.to_dataframe()
    if events.empty:
        print("  (none)")
    else:
        counts = events.groupby("kind").size().sort_values(ascending=False)
        for kind, total in counts.items():
            print(f"  {kind}: {total}")

    print("\nTotal Execution:")
    print(f"  Total time: {elapsed:.2f} seconds")
    print(f"  Total productions: {sum(result.productions for result in results)}")

    print("\n" + "=" * 80)


def main():
    """Main execution function."""
    logger.info("Starting lazy sequence demonstrations")
    logger.info("=" * 80)

    try:
        config = get_demo_config()
        setup_logging(config.verbose)

        logger.info(f"Items per sequence: {config.item_count}")
        logger.info(f"Delay per element: {config.delay_seconds:.2f} seconds")
        logger.info(f"Prefix: {config.prefix}")

        event_log = EventLog()
        sink = TeeSink(event_log, ConsoleSink(), LoggingSink())

        start_time = time.time()
        results = run_all(config, sink)
        elapsed = time.time() - start_time

        print_summary(results, event_log, elapsed)

        logger.info("Execution completed successfully!")
        return 0

    except KeyboardInterrupt:
        logger.warning("\nExecution interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"\nError during execution: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
