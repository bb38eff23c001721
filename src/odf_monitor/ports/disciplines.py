"""Discipline reference port - interface for the trusted discipline list."""

from abc import ABC, abstractmethod


class DisciplineReferencePort(ABC):
    """Interface for the curated collection of valid discipline codes.

    Entries match a code by their name or their metadata.discipline field.
    """

    @abstractmethod
    def exists(self, code: str) -> bool:
        pass

    @abstractmethod
    def find_all_codes(self) -> list[str]:
        """Return every registered code, sorted."""
        pass

    @abstractmethod
    def find_existing_among(self, codes: list[str]) -> set[str]:
        """Return the subset of codes that are registered.

        Implementations must answer with a single batched lookup.
        """
        pass
