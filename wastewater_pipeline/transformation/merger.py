"""
Dedup Merger - Transform Layer

Pure functions combining freshly fetched records with the persisted dataset.
Identity of a record is the exact (sample_number, extraction_date) pair as
received; dates are not normalised before comparison.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Hashable, Iterable, List, Optional, Tuple
import logging

from ..coreutils.time import try_parse_extraction_date

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


@dataclass
class MergeResult:
    records: List[Record]
    added: int
    skipped: int

    @property
    def has_new_data(self) -> bool:
        return self.added > 0


def _hashable(value: Any) -> Hashable:
    if isinstance(value, (list, dict)):
        return repr(value)
    return value


def record_key(record: Record) -> Tuple[Hashable, Hashable]:
    """Identity key used for deduplication"""
    return (
        _hashable(record.get("sample_number")),
        _hashable(record.get("extraction_date")),
    )


def sort_key(record: Record) -> date:
    """Parsed extraction date; unparseable dates sort first"""
    return try_parse_extraction_date(record.get("extraction_date")) or date.min


def sort_records(records: Iterable[Record]) -> List[Record]:
    """Stable ascending sort by parsed extraction date"""
    return sorted(records, key=sort_key)


def filter_duplicates(existing: List[Record], incoming: List[Record]) -> List[Record]:
    """
    Drop incoming records already present in existing

    Repeated keys inside the incoming batch are collapsed too, keeping the
    first occurrence.

    Args:
        existing: Records already persisted
        incoming: Freshly fetched records

    Returns:
        List: Incoming records with unseen keys, in incoming order
    """
    seen = {record_key(r) for r in existing}
    unique = []
    for record in incoming:
        key = record_key(record)
        if key in seen:
            continue
        seen.add(key)
        unique.append(record)
    return unique


def merge_records(existing: List[Record], incoming: List[Record]) -> MergeResult:
    """
    Merge incoming records into the existing dataset

    Args:
        existing: Persisted dataset
        incoming: Freshly fetched records

    Returns:
        MergeResult: Combined records sorted by extraction date. When nothing
            new arrived, records is the existing list untouched.
    """
    unique = filter_duplicates(existing, incoming)
    skipped = len(incoming) - len(unique)

    if not unique:
        logger.info(f"No new unique records ({skipped} duplicates skipped)")
        return MergeResult(records=existing, added=0, skipped=skipped)

    combined = sort_records(list(existing) + unique)
    logger.info(
        f"Merged {len(unique)} new records ({skipped} duplicates skipped), "
        f"total {len(combined)}"
    )
    return MergeResult(records=combined, added=len(unique), skipped=skipped)


def latest_extraction_date(records: List[Record]) -> Optional[date]:
    """
    Latest parsed extraction date in the dataset

    Returns:
        Optional[date]: None if the dataset holds no parseable date
    """
    latest = None
    unparseable = 0
    for record in records:
        parsed = try_parse_extraction_date(record.get("extraction_date"))
        if parsed is None:
            unparseable += 1
            continue
        if latest is None or parsed > latest:
            latest = parsed

    if unparseable:
        logger.warning(f"Ignored {unparseable} records with unparseable extraction_date")
    return latest
