"""Server side — ASGI pipeline, content negotiation, payload assembly."""
