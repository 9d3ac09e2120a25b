"""Hello World — the smallest perch site.

One page, one plain JSON route, and a custom 404. Request the page
normally to get the full document; send ``X-Perch-SPA: true`` to get the
navigation payload instead.

Run:
    python app.py
"""

from pathlib import Path

from perch import App, AppConfig, Request, Response

app = App(AppConfig(template_dir=Path(__file__).parent / "templates"))


@app.page("/", name="index", title="Hello")
def index():
    return {"greeting": "Hello, World!"}


@app.route("/api/status")
def status():
    return {"status": "ok"}


@app.route("/custom")
def custom():
    return Response("Created").with_status(201).with_header("X-Custom", "perch")


@app.error(404)
def not_found(request: Request):
    return f"Nothing at {request.path}"


if __name__ == "__main__":
    app.run()
