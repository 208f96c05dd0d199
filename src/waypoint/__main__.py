"""Entry point for Waypoint."""

import logging
import sys

from .app import run_app
from .config import Config


def setup_logging(config: Config) -> None:
    """Send log records to the configured file, away from the terminal UI."""
    log_path = config.get_log_path()
    if log_path is None:
        logging.getLogger("waypoint").addHandler(logging.NullHandler())
        return

    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(log_path),
        level=config.logging.level_number,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> int:
    """Main entry point for Waypoint."""
    try:
        # Load configuration
        config = Config.load()

        setup_logging(config)
        logging.getLogger(__name__).info(
            "Starting Waypoint in %s", config.scan_directory
        )

        # Run the application
        run_app(config)

        return 0
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
