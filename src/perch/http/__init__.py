"""HTTP primitives — immutable request, headers, and response types."""
