"""Run the sample: `python -m genapi.sample describe` or `python -m genapi.sample serve`."""

import argparse
import sys

import uvicorn

from genapi.config import get_settings
from genapi.sample.server import create_app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="genapi.sample")
    sub = parser.add_subparsers(dest="command", required=True)

    describe = sub.add_parser("describe", help="print the user group documentation")
    describe.add_argument("--language", choices=["en", "zh"], default=None)

    serve = sub.add_parser("serve", help="run the sample HTTP server")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    app = create_app(settings)

    if args.command == "describe":
        sys.stdout.write(app.state.user_group.describe(language=args.language))
        return 0

    uvicorn.run(
        app,
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
