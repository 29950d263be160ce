"""
Employees API — JSON File Storage
==================================

What:  Reads and writes the employees array kept by the map backend.
How:   Async file I/O (aiofiles) on a single JSON file. The directory and an
       empty `[]` file are created on first use, so a fresh checkout starts
       with an empty store instead of an error.
Who:   Owned by EmployeesServiceMap; loaded once at construction, written on save().

File format:
    [
      {
        "id": "8c1f...",
        "fullName": "John Doe",
        "avatar": "https://example.com/a.jpg",
        "department": "QA",
        "birthDate": "1990-01-01",
        "salary": 12000
      }
    ]

    Two-space indentation, UTF-8 by default. Writes go to a sibling temp
    file that replaces the target, so a crash never leaves half a JSON array.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

import aiofiles

from employees_api.exceptions import FileStorageError

logger = logging.getLogger(__name__)


class FileStorage:
    """
    JSON-array file used as the persistence layer of the map backend.

    Args:
        data_dir:  directory holding the data file (created when missing)
        file_name: name of the JSON file inside `data_dir`
        encoding:  text encoding for reads and writes
    """

    def __init__(self, data_dir: str, file_name: str, encoding: str = "utf-8"):
        self.data_dir = Path(data_dir)
        self.file_path = self.data_dir / file_name
        self.encoding = encoding

    async def ensure_storage_ready(self) -> None:
        """Creates the data directory and an empty `[]` file if either is missing."""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Cannot create data directory %s: %s", self.data_dir, e)
            raise FileStorageError(context={"path": str(self.data_dir), "os_error": str(e)})

        if not self.file_path.exists():
            logger.info("Data file %s not found, creating an empty one", self.file_path)
            await self._write_json([])

    async def load_employees(self) -> List[Dict[str, Any]]:
        """
        Returns the parsed array of employee documents.

        Raises:
            FileStorageError: on OS errors, text that does not decode with the
                configured encoding, invalid JSON, or a top-level value that
                is not an array.
        """
        await self.ensure_storage_ready()
        try:
            async with aiofiles.open(self.file_path, "r", encoding=self.encoding) as f:
                raw = await f.read()
        except OSError as e:
            logger.error("Failed to read %s: %s", self.file_path, e)
            raise FileStorageError(
                message="Failed to read employee data",
                context={"path": str(self.file_path), "os_error": str(e)},
            )
        except UnicodeDecodeError as e:
            logger.error("Data file %s is not valid %s: %s", self.file_path, self.encoding, e)
            raise FileStorageError(
                message="Employee data file is corrupted",
                context={"path": str(self.file_path), "encoding": self.encoding, "error": str(e)},
            )

        try:
            data = json.loads(raw) if raw.strip() else []
        except json.JSONDecodeError as e:
            logger.error("Data file %s is not valid JSON: %s", self.file_path, e)
            raise FileStorageError(
                message="Employee data file is corrupted",
                context={"path": str(self.file_path), "error": str(e)},
            )

        if not isinstance(data, list):
            raise FileStorageError(
                message="Employee data file must contain a JSON array",
                context={"path": str(self.file_path), "type": type(data).__name__},
            )

        logger.info("Loaded %d employee records from %s", len(data), self.file_path)
        return data

    async def save_employees(self, employees: List[Dict[str, Any]], is_updated: bool) -> bool:
        """
        Writes `employees` when there are unsaved changes.

        Returns:
            True if the file was written, False when `is_updated` is False.
        """
        if not is_updated:
            logger.info("Nothing to save: employee data has no changes")
            return False

        await self.ensure_storage_ready()
        await self._write_json(employees)
        logger.info("Saved %d employee records to %s", len(employees), self.file_path)
        return True

    async def _write_json(self, data: List[Dict[str, Any]]) -> None:
        tmp_path = self.file_path.with_name(self.file_path.name + ".tmp")
        try:
            async with aiofiles.open(tmp_path, "w", encoding=self.encoding) as f:
                await f.write(json.dumps(data, indent=2, ensure_ascii=False))
            os.replace(tmp_path, self.file_path)
        except OSError as e:
            logger.error("Failed to write %s: %s", self.file_path, e)
            raise FileStorageError(
                message="Failed to save employee data",
                context={"path": str(self.file_path), "os_error": str(e)},
            )
