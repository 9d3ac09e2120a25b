"""Development server.

Starts a pounce ASGI server with the live perch App object. pounce is
an optional dependency (``pip install perch[server]``).
"""

from perch.errors import ConfigurationError


def run_dev_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = True,
    app_path: str | None = None,
) -> None:
    """Start a single-worker pounce server with the given perch App.

    Args:
        app: ASGI callable (perch App instance).
        host: Bind host address.
        port: Bind port number.
        reload: Enable auto-reload on file changes.
        app_path: Optional ``"module:attribute"`` import string. When
            provided, pounce reimports the app on each reload cycle.
    """
    try:
        from pounce.config import ServerConfig
        from pounce.server import Server
    except ImportError as exc:
        msg = "The dev server needs pounce. Install it with: pip install 'perch[server]'"
        raise ConfigurationError(msg) from exc

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload,
        reload_include=(".html",),
    )
    server = Server(config, app, app_path=app_path)
    server.run()
