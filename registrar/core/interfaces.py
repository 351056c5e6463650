"""
Core interfaces for the registrar.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence


Row = List[str]


class RowStore(ABC):
    """
    Row-oriented storage for catalog and enrollment files.

    Implementations treat I/O failure as non-fatal: they log and return.
    """

    @abstractmethod
    def read(self, name: str) -> List[Row]:
        """Read all rows of a resource, or an empty list if it does not exist."""
        pass

    @abstractmethod
    def write_all(self, name: str, rows: Sequence[Sequence[str]]) -> None:
        """Replace the content of a resource with the given rows."""
        pass

    @abstractmethod
    def append(self, name: str, row: Sequence[str]) -> None:
        """Add one row to a resource without disturbing existing content."""
        pass
