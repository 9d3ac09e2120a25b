"""``perch routes`` — list pages and plain routes.

Pages print their name and declared features; plain routes show ``-``.
"""

import argparse
import sys

from perch.cli._resolve import resolve_app


def run_routes(args: argparse.Namespace) -> None:
    """Print a PATH / NAME / FEATURES table for ``args.app``."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    app._ensure_frozen()
    router = app._router
    routes = router.routes if router is not None else []
    if not routes:
        print("No routes registered.")
        return

    rows: list[tuple[str, str, str]] = []
    for route in routes:
        if route.page is not None:
            features = ", ".join(route.page.features) or "-"
            rows.append((route.path, route.page.name, features))
        else:
            handler_name = getattr(route.handler, "__name__", str(route.handler))
            rows.append((route.path, route.name or handler_name, "-"))

    max_path = max(4, *(len(r[0]) for r in rows))
    max_name = max(4, *(len(r[1]) for r in rows))

    fmt = f"{{:<{max_path}}}  {{:<{max_name}}}  {{}}"
    print(fmt.format("PATH", "NAME", "FEATURES"))
    sep_len = max_path + max_name + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for path, name, features in rows:
        print(fmt.format(path, name, features))
