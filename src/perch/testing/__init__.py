"""Test utilities for perch applications.

``TestClient`` drives the ASGI app directly and returns production
``Response`` objects. ``Browser`` boots a client ``Runtime`` against the
app through httpx's ASGI transport, so navigation tests exercise the
real server and the real client together::

    from perch.testing import Browser, TestClient, assert_is_payload
"""

from perch.testing.assertions import (
    assert_is_document,
    assert_is_payload,
    payload_of,
)
from perch.testing.browser import Browser
from perch.testing.client import TestClient

__all__ = [
    "Browser",
    "TestClient",
    "assert_is_document",
    "assert_is_payload",
    "payload_of",
]
