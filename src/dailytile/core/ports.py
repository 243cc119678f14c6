from typing import Mapping, Protocol

from .model import CachedNote, TransportRecord


class Transport(Protocol):
    """
    At-least-once, possibly reordered, size-limited channel with replace
    semantics for a single logical path.
    """

    def send(self, path: str, record: TransportRecord, urgent: bool = False) -> None:
        """Deliver record or raise TransportFailure."""
        pass


class KeyValueStore(Protocol):
    """
    Durable string/number store scoped to one namespace.
    Implementations raise StorageError on read or write failure.
    """

    def get(self, key: str) -> str | None:
        pass

    def get_many(self, keys: list[str]) -> dict[str, str]:
        pass

    def put_many(self, values: Mapping[str, str | int]) -> None:
        """Write all values atomically."""
        pass


class NoteObserver(Protocol):
    def __call__(self, note: CachedNote) -> None:
        pass
