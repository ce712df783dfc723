"""
Local Storage - Load Layer

Persistence of the full wastewater dataset. The JSON file is the source of
truth between runs; it is read once at start and replaced atomically on
write.
"""

import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union
import logging

from ..errors import StoreReadError, StoreWriteError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class Store(Protocol):
    """Anything that can load and save the full dataset"""

    def load(self) -> List[Record]: ...

    def save(self, records: List[Record]) -> None: ...


def _file_mode(path: Path) -> int:
    """Mode for a rewritten file: keep the current one, else honour the umask"""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def _fsync_directory(path: Path) -> None:
    # persists the rename itself; directories cannot be opened on Windows
    if os.name != "posix":
        return
    dir_fd = os.open(path, os.O_RDONLY)
    try:
        os.fsync(dir_fd)
    finally:
        os.close(dir_fd)


def write_json_atomic(path: Union[str, Path], data: Any) -> None:
    """
    Write data as pretty-printed UTF-8 JSON, replacing path atomically

    The data is written to a temp file next to path and renamed over it,
    so a failed write leaves the previous file intact. An existing file keeps
    its permissions.

    Raises:
        StoreWriteError: On serialisation or filesystem errors
    """
    path = Path(path)
    tmp_path: Optional[str] = None
    try:
        # Ensure directory exists
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, _file_mode(path))
        os.replace(tmp_path, path)
        tmp_path = None
        _fsync_directory(path.parent)
    except (OSError, TypeError, ValueError) as e:
        raise StoreWriteError(str(path), str(e)) from e
    finally:
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass


class JsonFileStore:
    """Dataset stored as a pretty-printed UTF-8 JSON array"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"JsonFileStore({str(self.path)!r})"

    def read(self) -> List[Record]:
        """
        Read the store, raising on any problem

        Returns:
            List[Dict]: Stored records

        Raises:
            StoreReadError: File missing, unreadable, invalid JSON, or not
                an array of objects
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise StoreReadError(str(self.path), "file not found") from None
        except (OSError, UnicodeDecodeError, ValueError) as e:
            raise StoreReadError(str(self.path), str(e)) from e

        if not isinstance(data, list):
            raise StoreReadError(
                str(self.path), f"expected a JSON array, got {type(data).__name__}"
            )
        if not all(isinstance(record, dict) for record in data):
            raise StoreReadError(str(self.path), "array contains non-object items")
        return data

    def load(self) -> List[Record]:
        """
        Load the dataset, treating any read problem as an empty store

        Returns:
            List[Dict]: Stored records, or [] when there is no valid data
        """
        logger.info(f"Loading dataset from JSON: {self.path}")
        try:
            records = self.read()
        except StoreReadError as e:
            logger.warning(f"No valid existing data found ({e.reason}), starting empty")
            return []

        logger.info(f"Loaded {len(records)} records from {self.path}")
        return records

    def save(self, records: List[Record]) -> None:
        """
        Replace the store with records

        Args:
            records: Full dataset to persist

        Raises:
            StoreWriteError: On serialisation or filesystem errors
        """
        logger.info(f"Saving {len(records)} records to JSON: {self.path}")
        write_json_atomic(self.path, records)
        logger.info(f"Saved {len(records)} records to {self.path}")


class MemoryStore:
    """In-memory store for dry runs and tests"""

    def __init__(self, records: Optional[List[Record]] = None):
        self.records = list(records) if records is not None else []
        self.save_count = 0

    def load(self) -> List[Record]:
        return list(self.records)

    def save(self, records: List[Record]) -> None:
        self.records = list(records)
        self.save_count += 1


def file_exists(filepath: Union[str, Path]) -> bool:
    """
    Check if file exists

    Args:
        filepath: Path to file

    Returns:
        bool: True if file exists
    """
    return os.path.exists(filepath)


def save_dashboard_payload(
    records: List[Record], filepath: Union[str, Path] = "public/data/data.json"
) -> str:
    """
    Save the dataset in the {"body": [...]} envelope the dashboard loads

    Args:
        records: Merged dataset, already sorted by extraction date
        filepath: Path to save file

    Returns:
        str: Path to saved file
    """
    logger.info(f"Saving dashboard payload to JSON: {filepath}")
    write_json_atomic(filepath, {"body": records})
    logger.info(f"Saved {len(records)} records to {filepath}")
    return str(filepath)
