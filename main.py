"""Main entry point for the koi pond.

This module provides command-line options to run the pond:
- Window mode (default): pygame window with mouse and keyboard controls
- Headless mode: no window, fixed number of ticks, population stats logged
"""

import argparse
import logging
import random
import sys

from pond.config.display import SCREEN_HEIGHT, SCREEN_WIDTH, SEPARATOR_WIDTH, TARGET_TICK_RATE
from pond.config.store import ConfigStore
from pond.exceptions import ConfigurationError
from pond.logging_config import configure_logging

logger = logging.getLogger(__name__)


def run_window(width: int, height: int, config_store: ConfigStore, seed=None):
    """Run the pond in a pygame window."""
    import koipond

    koipond.main(width, height, config_store=config_store, seed=seed)


def run_headless(ticks: int, width: int, height: int, config_store: ConfigStore, seed=None):
    """Run the pond without a window.

    Time is simulated: the clock advances exactly one tick interval per tick,
    so a run is reproducible for a given seed.

    Args:
        ticks: Number of ticks to simulate
        width: Surface width in pixels
        height: Surface height in pixels
        config_store: Configuration to run with
        seed: Optional random seed for deterministic behavior
    """
    from pond.clock import ManualClock
    from pond.environment import PondEnvironment
    from pond.frame_driver import FrameDriver
    from pond.render_backend import HeadlessRenderBackend

    clock = ManualClock()
    renderer = HeadlessRenderBackend()
    environment = PondEnvironment(
        width, height, config_store=config_store, renderer=renderer, clock=clock, rng=random.Random(seed)
    )
    environment.initialize_objects()
    driver = FrameDriver(environment)

    for _ in range(ticks):
        clock.advance(driver.tick_interval)
        driver.tick()

    logger.info("=" * SEPARATOR_WIDTH)
    logger.info("Simulated %d ticks (%.1f s of pond time)", driver.tick_count, clock.now())
    for kind, count in environment.object_counts().items():
        logger.info("  %-10s %d", kind, count)
    logger.info("Draw calls:")
    for line in renderer.summary():
        logger.info("  %s", line)
    logger.info("=" * SEPARATOR_WIDTH)
    return environment


def build_config_store(theme: str, config_path=None) -> ConfigStore:
    store = ConfigStore(theme=theme)
    if config_path:
        store.load_file(config_path)
    return store


def main():
    """Parse command-line arguments and run the appropriate mode."""
    parser = argparse.ArgumentParser(
        description="Koi Pond Simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Open the pond window (default)
  python main.py

  # Night theme in a smaller window
  python main.py --theme night --width 960 --height 540

  # Headless run for ten simulated seconds, reproducible
  python main.py --headless --ticks 1200 --seed 42
        """,
    )

    parser.add_argument("--headless", action="store_true", help="Run without a window and log stats")
    parser.add_argument(
        "--ticks",
        type=int,
        default=TARGET_TICK_RATE * 60,
        help="Ticks to simulate in headless mode (default: one minute of pond time)",
    )
    parser.add_argument("--width", type=int, default=SCREEN_WIDTH, help=f"Surface width (default: {SCREEN_WIDTH})")
    parser.add_argument(
        "--height", type=int, default=SCREEN_HEIGHT, help=f"Surface height (default: {SCREEN_HEIGHT})"
    )
    parser.add_argument("--theme", type=str, default="koi", help="Starting theme (koi, sakura, night, lily)")
    parser.add_argument(
        "--config", type=str, default=None, metavar="FILENAME", help="JSON file with configuration overrides"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for deterministic behavior (optional)")
    parser.add_argument("--log-level", type=str, default=None, help="Log level (default: $KOIPOND_LOG_LEVEL or INFO)")

    args = parser.parse_args()
    configure_logging(level=args.log_level, extra_loggers=[__name__])

    if args.width <= 0 or args.height <= 0:
        parser.error("--width and --height must be positive")

    try:
        config_store = build_config_store(args.theme, args.config)
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)

    if args.headless:
        logger.info("Starting headless pond...")
        logger.info("Configuration: %d ticks on %dx%d, theme '%s'", args.ticks, args.width, args.height, args.theme)
        run_headless(args.ticks, args.width, args.height, config_store, seed=args.seed)
    else:
        try:
            run_window(args.width, args.height, config_store, seed=args.seed)
        except ImportError as e:
            logger.error("Error: Required dependencies not installed: %s", e)
            logger.error("Install with: pip install -e .")
            sys.exit(1)


if __name__ == "__main__":
    main()
