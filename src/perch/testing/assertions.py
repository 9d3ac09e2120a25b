"""Assertion helpers for perch page responses.

Each assertion produces a clear error message on failure.
"""

from perch.http.response import Response
from perch.payload import NavigationPayload


def assert_is_document(response: Response, *, status: int = 200) -> None:
    """Assert the response is a full HTML document with a render target."""
    assert response.status == status, f"Expected status {status}, got {response.status}"
    assert response.content_type.startswith("text/html"), (
        f"Expected an HTML document, got {response.content_type}"
    )
    lower = response.text.lower()
    assert "<!doctype html>" in lower, "Response is not a full document (no doctype)"
    assert 'id="app"' in response.text, "Document has no render target (#app)"


def payload_of(response: Response) -> NavigationPayload:
    """Parse and validate a navigation payload response."""
    return NavigationPayload.from_json(response.body_bytes)


def assert_is_payload(response: Response, *, status: int = 200) -> NavigationPayload:
    """Assert the response is a valid navigation payload and return it."""
    assert response.status == status, f"Expected status {status}, got {response.status}"
    assert response.content_type.startswith("application/json"), (
        f"Expected a JSON payload, got {response.content_type}\n"
        f"Response body: {response.text[:500]}"
    )
    return payload_of(response)
