"""Routing — the page route table and the compiled request router.

Pages and plain routes are registered during setup and compiled into an
immutable lookup structure when the app freezes.
"""
