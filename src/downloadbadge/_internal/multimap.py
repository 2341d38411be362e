"""MultiValueMapping protocol — the shape badge parameters are read through.

A structural protocol so the normalizer and URL assembler can accept
``QueryParams`` or any other multi-valued mapping without coupling to
the concrete type.
"""

from collections.abc import Iterator
from typing import Protocol, runtime_checkable


@runtime_checkable
class MultiValueMapping(Protocol):
    """A read-only string mapping where keys can have multiple values.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key (``link`` repeats for
    social badges).
    ``get_int`` and ``get_bool`` read typed values, falling back to
    *default* when the key is missing or unparseable.
    """

    def __getitem__(self, key: str) -> str: ...
    def __contains__(self, key: object) -> bool: ...
    def __iter__(self) -> Iterator[str]: ...
    def __len__(self) -> int: ...
    def get(self, key: str, default: str | None = None) -> str | None: ...
    def get_list(self, key: str) -> list[str]: ...
    def get_int(self, key: str, default: int | None = None) -> int | None: ...
    def get_bool(self, key: str, default: bool | None = None) -> bool | None: ...
