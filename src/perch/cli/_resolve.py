"""App import resolution for ``perch run`` and ``perch routes``."""

import importlib
import os
import sys

from perch.app import App


def _ensure_cwd_importable() -> None:
    """Put the working directory on ``sys.path`` so ``app:app`` imports a local file."""
    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)


def resolve_app(import_string: str) -> App:
    """Resolve ``"module:attribute"`` to a perch App.

    The attribute defaults to ``app``. A callable that is not an App is
    treated as a factory and called with no arguments, so
    ``"myapp:create_app"`` works too.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the factory fails or the result is not a perch ``App``.
    """
    module_path, _, attr_name = import_string.partition(":")
    _ensure_cwd_importable()
    target = getattr(importlib.import_module(module_path), attr_name or "app")

    if callable(target) and not isinstance(target, App):
        try:
            target = target()
        except Exception as exc:
            msg = f"App factory {import_string!r} failed: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(target, App):
        msg = f"{import_string!r} resolved to {type(target).__name__}, not a perch.App instance"
        raise TypeError(msg)
    return target
