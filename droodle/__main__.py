"""Entry point for Droodle Clicker."""

import argparse
import logging
from pathlib import Path

from droodle.app import ClickerApp
from droodle.engine.save import SAVE_DIR, JsonFileStore, PersistenceGateway


def main() -> None:
    parser = argparse.ArgumentParser(description="Droodle Clicker")
    parser.add_argument("--save-dir", type=Path, default=SAVE_DIR, help=f"Save directory (default: {SAVE_DIR})")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    args = parser.parse_args()

    # The terminal belongs to Textual, so logs go to a file
    args.save_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=args.save_dir / "droodle.log",
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    gateway = PersistenceGateway(JsonFileStore(args.save_dir))
    app = ClickerApp(gateway)
    app.run()


if __name__ == "__main__":
    main()
