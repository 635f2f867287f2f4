from __future__ import annotations

import argparse
import os
from typing import List, Optional

import uvicorn

from ..config import CONFIG_ENV, configure_logging, load_settings
from ..protocol.uci.loop import run_uci


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="fpgachess", description="fpgachess engine")
    parser.add_argument("--config", type=str, default=None, help="YAML settings file")
    sub = parser.add_subparsers(dest="command")
    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, default=None)
    serve.add_argument("--port", type=int, default=None)
    sub.add_parser("uci", help="Speak UCI on stdin/stdout")
    args = parser.parse_args(argv)

    settings = load_settings(args.config)
    if args.command == "uci":
        configure_logging(settings)
        run_uci()
        return

    if args.config:
        # The factory runs in uvicorn and reads its settings file from here
        os.environ[CONFIG_ENV] = os.path.abspath(args.config)
    uvicorn.run(
        "fpgachess.protocol.http.app:create_app",
        factory=True,
        host=args.host if getattr(args, "host", None) else settings.host,
        port=args.port if getattr(args, "port", None) else settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
