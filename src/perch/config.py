"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path

from perch.server.negotiation import BOT_USER_AGENTS, SPA_HEADER, SPA_HEADER_ALT


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, port=3000, template_dir="views")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Templates
    template_dir: str | Path = "templates"
    component_dirs: tuple[str | Path, ...] = ()  # Extra template directories (partials, shared pages)
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Full document shell
    document_template: str = "perch/document.html"
    stylesheet: str = "/static/app.css"
    default_title: str = "Perch"
    lang: str = "en"

    # Content negotiation
    spa_headers: tuple[str, ...] = (SPA_HEADER, SPA_HEADER_ALT)
    bot_user_agents: tuple[str, ...] = BOT_USER_AGENTS

    # Runtime handle tags, embedded in the bootstrap state
    runtime_version: str = "1.0.0-alpha.1"
    runtime_phase: int = 1
