"""Showcase — two pages, three features, in-place navigation.

The server half declares pages with the features they need; the client
half registers those features. Open ``/`` in a browser-like client and
follow the "Meet the team" link: the hero and footer are destroyed, the
content is swapped, and the team and footer are mounted for ``/about``.

Run the server:
    python app.py

Drive it headlessly:
    async with Browser(app, registry) as browser:
        await browser.open("/")
        await browser.click(".cta-button")
"""

import logging
from pathlib import Path

from perch import App, AppConfig, PageData, PageMeta
from perch.client import Event, Feature, FeatureContext, FeatureRegistry

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

TEAM = [
    {"name": "Ada", "role": "Runtime"},
    {"name": "Grace", "role": "Server"},
    {"name": "Linus", "role": "Templates"},
]

app = App(AppConfig(template_dir=TEMPLATES_DIR, default_title="Showcase"))
registry = FeatureRegistry()


# -- Pages --


@app.page(
    "/",
    name="home",
    features=("hero", "footer"),
    title="Showcase",
    description="Server-rendered pages with in-place navigation",
)
def home():
    return {"headline": "Pages that stay put", "tagline": "Built with perch"}


@app.page("/about", name="about", features=("team", "footer"), title="About")
def about():
    return PageData(
        {"members": TEAM, "tagline": "Built with perch"},
        meta=PageMeta(title=f"About ({len(TEAM)} people)", description="The team"),
    )


# -- Features --


@registry.register("hero")
class Hero(Feature):
    """Like button with a per-mount counter."""

    def __init__(self) -> None:
        super().__init__()
        self.likes = 0

    def mount(self, context: FeatureContext) -> None:
        button = context.element.select_one(".like-button")
        if button is not None:
            self.listen(button, "click", self.on_like)

    def on_like(self, event: Event) -> None:
        self.likes += 1
        event.target.string = f"Liked {self.likes}"

    def reset(self) -> None:
        self.likes = 0


@registry.register("team")
class Team(Feature):
    def mount(self, context: FeatureContext) -> None:
        members = context.data.get("members", [])
        context.element["data-count"] = str(len(members))
        logger.debug("Team mounted with %d members", len(members))


@registry.register("footer")
class Footer(Feature):
    """Marks the footer with the route it was mounted for."""

    def mount(self, context: FeatureContext) -> None:
        context.element["data-mounted-for"] = context.route

    def unmount(self) -> None:
        if self.element is not None:
            del self.element["data-mounted-for"]


if __name__ == "__main__":
    app.run()
