"""JSON file storage for pipeline state."""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Union

logger = logging.getLogger(__name__)


class WorklistError(Exception):
    """Raised when a pipeline input file cannot be read."""


class JsonFileStore:
    """Reads and rewrites the JSON array files shared between pipeline stages."""

    def write_records(self, path: Union[str, Path], records: List[Dict[str, Any]]) -> None:
        """
        Replace the contents of a JSON file with the given records.

        The file is written to a temporary sibling first and moved into place,
        so readers only ever see a complete array.

        Args:
            path: Destination file
            records: Records to serialize, in order
        """
        path = Path(path)
        if path.parent and not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix='.tmp', dir=str(path.parent)
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
        except Exception:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise

        logger.debug(f"Wrote {len(records)} records to {path}")

    def read_records(self, path: Union[str, Path]) -> List[Dict[str, Any]]:
        """
        Read a JSON array of records.

        Args:
            path: File to read

        Returns:
            List of record dictionaries

        Raises:
            WorklistError: If the file is missing, unreadable or not a JSON array
        """
        path = Path(path)
        try:
            with open(path, encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading {path}: {e}")
            raise WorklistError(f"Cannot read {path}: {e}") from e

        if not isinstance(data, list):
            logger.error(f"Error reading {path}: expected a JSON array")
            raise WorklistError(f"{path} does not contain a JSON array")

        logger.info(f"Read {len(data)} records from {path}")
        return data
