"""Entry point for the web version: python -m droodle.web"""

import argparse
import logging
from pathlib import Path

from droodle.engine.save import SAVE_DIR, JsonFileStore, PersistenceGateway
from droodle.web.server import configure, run_server


def main() -> None:
    parser = argparse.ArgumentParser(description="Droodle Clicker — Web Version")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=5000, help="Port (default: 5000)")
    parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    parser.add_argument("--save-dir", type=Path, default=SAVE_DIR, help=f"Save directory (default: {SAVE_DIR})")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    configure(PersistenceGateway(JsonFileStore(args.save_dir)))

    print("\n  Droodle Clicker (Web Edition)")
    print(f"  ➜ http://{args.host}:{args.port}/api/state\n")

    run_server(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
