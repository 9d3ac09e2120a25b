"""``perch run`` — development server command."""

import argparse
import sys

from perch.cli._resolve import resolve_app
from perch.errors import ConfigurationError


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` and serve it with pounce.

    Passing the import string lets pounce reimport the app on reload.
    """
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    from perch.server.dev import run_dev_server

    app._ensure_frozen()
    try:
        run_dev_server(
            app,
            args.host or app.config.host,
            args.port or app.config.port,
            reload=args.reload or app.config.debug,
            app_path=args.app,
        )
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
