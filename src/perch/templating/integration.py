"""Kida environment setup and app binding.

Creates a kida Environment from perch's AppConfig and binds
user-registered filters and globals. The environment is created
once during App._freeze() and passed through the request pipeline.
"""

from collections.abc import Callable, Mapping
from typing import Any

from kida import ChoiceLoader, Environment, FileSystemLoader, PackageLoader

from perch.config import AppConfig
from perch.templating.filters import BUILTIN_FILTERS, BUILTIN_GLOBALS


def create_environment(
    config: AppConfig,
    filters: dict[str, Callable[..., Any]],
    globals_: dict[str, Any],
) -> Environment:
    """Create a kida Environment from app configuration.

    Loader order: the app's template directory, any component
    directories, then perch's packaged layouts (``perch/document.html``).
    An app can shadow the document shell by shipping its own
    ``perch/document.html``.
    """
    loaders = [
        FileSystemLoader(str(config.template_dir)),
    ]
    loaders.extend(FileSystemLoader(str(d)) for d in config.component_dirs)
    loaders.append(PackageLoader("perch.templating", "layouts"))

    env = Environment(
        loader=ChoiceLoader(loaders),
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )

    env.update_filters(BUILTIN_FILTERS)
    # User-defined filters may override built-ins
    if filters:
        env.update_filters(filters)

    for name, value in BUILTIN_GLOBALS.items():
        env.add_global(name, value)
    for name, value in globals_.items():
        env.add_global(name, value)

    return env


def render_template(env: Environment, name: str, context: Mapping[str, Any]) -> str:
    """Render a full template to string."""
    template = env.get_template(name)
    return template.render(dict(context))
