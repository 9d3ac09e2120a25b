"""Immutable, case-insensitive HTTP headers.

Keeps the raw byte pairs from the ASGI scope for pass-through and builds a
lowercase name index once, so negotiation can probe several headers per
request without rescanning the list.
"""

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``headers[name]`` returns the first value; ``get_list(name)`` returns
    every value in arrival order.
    """

    __slots__ = ("_index", "_raw")

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        self._raw = raw
        index: dict[str, list[str]] = {}
        for name, value in raw:
            index.setdefault(name.decode("latin-1").lower(), []).append(value.decode("latin-1"))
        self._index = index

    @classmethod
    def from_dict(cls, values: Mapping[str, str]) -> "Headers":
        """Build headers from a plain ``{name: value}`` mapping.

        Lookups return the values unchanged; only ``raw`` is latin-1, with
        unencodable characters replaced.
        """
        headers = cls(
            tuple(
                (name.lower().encode("latin-1", "replace"), value.encode("latin-1", "replace"))
                for name, value in values.items()
            )
        )
        index: dict[str, list[str]] = {}
        for name, value in values.items():
            index.setdefault(name.lower(), []).append(value)
        headers._index = index
        return headers

    def __getitem__(self, key: str) -> str:
        values = self._index.get(key.lower())
        if not values:
            raise KeyError(key)
        return values[0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        first = {name: values[0] for name, values in self._index.items()}
        return f"Headers({first!r})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        values = self._index.get(key.lower())
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        """Every value sent for *key*."""
        return list(self._index.get(key.lower(), ()))

    def is_true(self, key: str) -> bool:
        """True when *key* is present with the value ``true`` (any case)."""
        value = self.get(key)
        return value is not None and value.strip().lower() == "true"

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """Raw header byte pairs, as received."""
        return self._raw
