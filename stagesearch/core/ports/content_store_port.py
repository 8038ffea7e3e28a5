"""Content Store Port Interface."""

from abc import ABC, abstractmethod
from collections.abc import Iterator

from ..domain import Record, Stage


class ContentStorePort(ABC):
    """Abstract interface for the authoritative content store."""

    @abstractmethod
    def get_by_type_and_id(self, type_name: str, record_id: int, stage: Stage) -> Record | None:
        """Fetch one record as it exists in ``stage``, or None."""
        ...

    @abstractmethod
    def list_by_type(self, type_name: str, stage: Stage) -> Iterator[Record]:
        """Iterate every record of a type as it exists in ``stage``."""
        ...

    @abstractmethod
    def current_stage(self) -> Stage:
        """Stage the store reads from when the caller does not say."""
        ...

    @abstractmethod
    def registered_types(self) -> dict[str, type[Record]]:
        """Type name to record class for every type the store knows."""
        ...

    def get_type(self, type_name: str) -> type[Record] | None:
        """Record class registered under ``type_name``."""
        return self.registered_types().get(type_name)
