#!/usr/bin/env python3
import argparse
import os
import sys

import uvicorn

# scripts/run_server.py -> repo root is parent of scripts/
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.config import load_settings  # noqa: E402
from app.main import create_app  # noqa: E402


def parse_args(argv=None) -> argparse.Namespace:
    defaults = load_settings()

    p = argparse.ArgumentParser(description="Run the Greenlight movie API.")
    p.add_argument("--host", default="0.0.0.0")
    p.add_argument("--port", type=int, default=defaults.port, help="API server port")
    p.add_argument(
        "--env",
        default=defaults.env,
        choices=["development", "staging", "production"],
        help="Environment",
    )
    p.add_argument("--db-dsn", default=defaults.db_dsn, help="SQLite database path")
    p.add_argument("--db-timeout", type=float, default=defaults.db_timeout, help="Seconds to wait on a locked database")
    p.add_argument("--max-body-bytes", type=int, default=defaults.max_body_bytes)
    p.add_argument("--log-level", default=defaults.log_level)
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    settings = load_settings().model_copy(
        update={
            "port": args.port,
            "env": args.env,
            "db_dsn": args.db_dsn,
            "db_timeout": args.db_timeout,
            "max_body_bytes": args.max_body_bytes,
            "log_level": args.log_level.upper(),
        }
    )

    uvicorn.run(create_app(settings), host=args.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
