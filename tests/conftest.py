"""Shared fixtures: a three-page site, recording features, a browser."""

from pathlib import Path
from typing import Any

import pytest

from perch.app import App
from perch.client.features import Feature, FeatureContext, FeatureRegistry
from perch.config import AppConfig
from perch.routing.table import PageData
from perch.testing import Browser

TEMPLATES_DIR = Path(__file__).parent / "templates"


class RecordingFeature(Feature):
    """Appends ("init", name, route) and ("destroy", name) to a shared log.

    Also records the route marker present at init time, so tests can
    check that content was replaced before features were mounted.
    """

    def __init__(self, name: str, log: list[tuple[Any, ...]]) -> None:
        super().__init__()
        self.name = name
        self.log = log
        self.seen_marker: str | None = None
        self.seen_data: dict[str, Any] | None = None

    def mount(self, context: FeatureContext) -> None:
        assert context.document is not None
        self.seen_marker = context.document.route_marker
        self.seen_data = dict(context.data)
        self.log.append(("init", self.name, context.route))

    def unmount(self) -> None:
        self.log.append(("destroy", self.name))


def build_site(config: AppConfig) -> App:
    app = App(config)

    @app.page("/", name="home", features=("hero", "footer"), title="Home", description="Welcome page")
    def home():
        return {"headline": "Welcome"}

    @app.page(
        "/about",
        name="about",
        features=("team", "footer"),
        title="About",
        description="Who we are",
    )
    def about():
        return PageData({"members": ["Ada", "Linus"]})

    @app.page("/contact", name="contact", features=("form",))
    def contact():
        return {"email": "hi@example.com"}

    @app.route("/health")
    def health():
        return {"status": "ok"}

    return app


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(template_dir=TEMPLATES_DIR)


@pytest.fixture
def site(config: AppConfig) -> App:
    return build_site(config)


@pytest.fixture
def log() -> list[tuple[Any, ...]]:
    return []


@pytest.fixture
def registry(log: list[tuple[Any, ...]]) -> FeatureRegistry:
    return FeatureRegistry(
        {name: RecordingFeature(name, log) for name in ("hero", "footer", "team", "form")}
    )


@pytest.fixture
async def browser(site: App, registry: FeatureRegistry):
    async with Browser(site, registry) as b:
        yield b


@pytest.fixture
def templates_dir() -> Path:
    return TEMPLATES_DIR


@pytest.fixture
def make_site():
    """Factory building the three-page site with a custom config."""
    return build_site
