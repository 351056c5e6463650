"""
Flat-file row store.

Rows are joined with commas and written one per line. Fields are never quoted
or escaped, so a comma inside a field splits it on the next read.
"""

import logging
import os
from typing import List, Sequence

from ..core.interfaces import Row, RowStore


logger = logging.getLogger(__name__)

DELIMITER = ","


class CsvRowStore(RowStore):
    """Best-effort row store over files in one directory."""

    def __init__(self, base_path: str = "."):
        self._base_path = base_path

    @property
    def base_path(self) -> str:
        return self._base_path

    def _get_path(self, name: str) -> str:
        """Get file path for a resource."""
        return os.path.join(self._base_path, name)

    def _ensure_directory_exists(self) -> None:
        if self._base_path:
            os.makedirs(self._base_path, exist_ok=True)

    def read(self, name: str) -> List[Row]:
        """Read all rows. A missing file is an empty resource."""
        path = self._get_path(name)
        rows: List[Row] = []

        if not os.path.exists(path):
            return rows

        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                for line in f:
                    rows.append(line.rstrip("\r\n").split(DELIMITER))
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Read error on %s: %s", path, e)
        return rows

    def write_all(self, name: str, rows: Sequence[Sequence[str]]) -> None:
        """Replace all rows of a resource."""
        path = self._get_path(name)
        try:
            self._ensure_directory_exists()
            with open(path, "w", encoding="utf-8", newline="") as f:
                for row in rows:
                    f.write(DELIMITER.join(row) + "\n")
        except OSError as e:
            logger.error("Write error on %s: %s", path, e)
            return
        logger.debug("Wrote %d rows to %s", len(rows), path)

    def append(self, name: str, row: Sequence[str]) -> None:
        """Append one row to a resource."""
        path = self._get_path(name)
        try:
            self._ensure_directory_exists()
            with open(path, "a", encoding="utf-8", newline="") as f:
                f.write(DELIMITER.join(row) + "\n")
        except OSError as e:
            logger.error("Append error on %s: %s", path, e)
