"""
Data Validators - Transform Layer

Pure functions for validating incoming records and reporting on the
quality of the merged dataset before it is written.
"""

import polars as pl
from datetime import date
from typing import Any, Dict, List, Tuple
from pydantic import ValidationError

from ..coreutils.time import try_parse_extraction_date
from ..extract.schemas import WastewaterRecord
from .schemas import RECORD_KEYS_SCHEMA
import logging

logger = logging.getLogger(__name__)

KEY_FIELDS = ["sample_number", "extraction_date", "measuring_point"]


def validate_records(records: List[Any]) -> Tuple[List[Dict[str, Any]], int]:
    """
    Validate raw records against the WastewaterRecord schema

    Args:
        records: Raw records from the API

    Returns:
        Tuple: (valid records unchanged, number of rejected records)
    """
    valid = []
    invalid = 0
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning(f"Rejected record #{index}: not an object")
            invalid += 1
            continue
        try:
            WastewaterRecord.model_validate(record)
        except ValidationError as e:
            logger.warning(
                f"Rejected record #{index} "
                f"(sample_number={record.get('sample_number')!r}): "
                f"{e.error_count()} validation errors"
            )
            logger.debug(str(e))
            invalid += 1
            continue
        valid.append(record)

    if invalid:
        logger.warning(f"{invalid} of {len(records)} records failed validation")
    return valid, invalid


def records_to_keys_frame(records: List[Dict[str, Any]]) -> pl.DataFrame:
    """Flatten the identity and station fields of records into a DataFrame"""
    rows = []
    for record in records:
        sample_number = record.get("sample_number")
        extraction_date = record.get("extraction_date")
        measuring_point = record.get("measuring_point")
        rows.append(
            {
                "sample_number": None if sample_number is None else str(sample_number),
                "extraction_date": extraction_date
                if isinstance(extraction_date, str)
                else None,
                "measuring_point": measuring_point
                if isinstance(measuring_point, str)
                else None,
                "date": try_parse_extraction_date(extraction_date),
            }
        )
    return pl.DataFrame(rows, schema=RECORD_KEYS_SCHEMA)


def validate_dataset_quality(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Validate data quality of a dataset and return quality metrics

    Args:
        records: Dataset about to be persisted

    Returns:
        Dict: Quality metrics
    """
    logger.info("Validating dataset quality")
    df = records_to_keys_frame(records)

    quality_metrics = {
        "total_records": df.height,
        "null_counts": {},
        "duplicate_keys": 0,
        "unparseable_dates": 0,
        "stations": 0,
        "is_sorted": True,
    }

    if df.height == 0:
        return quality_metrics

    for column in KEY_FIELDS:
        quality_metrics["null_counts"][column] = df.select(
            pl.col(column).is_null().sum()
        ).item()

    quality_metrics["duplicate_keys"] = df.height - df.n_unique(
        subset=["sample_number", "extraction_date"]
    )
    quality_metrics["unparseable_dates"] = df.select(
        (pl.col("date").is_null() & pl.col("extraction_date").is_not_null()).sum()
    ).item()
    quality_metrics["stations"] = df.select(
        pl.col("measuring_point").drop_nulls().n_unique()
    ).item()
    dates = df.get_column("date").to_list()
    quality_metrics["is_sorted"] = all(
        (a or date.min) <= (b or date.min) for a, b in zip(dates, dates[1:])
    )

    # Log quality issues
    for column, null_count in quality_metrics["null_counts"].items():
        if null_count > 0:
            logger.warning(f"Column '{column}' has {null_count} null values")

    if quality_metrics["duplicate_keys"] > 0:
        logger.warning(
            f"Duplicate (sample_number, extraction_date) keys: "
            f"{quality_metrics['duplicate_keys']}"
        )
    if quality_metrics["unparseable_dates"] > 0:
        logger.warning(
            f"Unparseable extraction dates: {quality_metrics['unparseable_dates']}"
        )
    if not quality_metrics["is_sorted"]:
        logger.warning("Dataset is not sorted ascending by extraction_date")

    logger.info(
        f"Dataset quality validation completed: {df.height} records, "
        f"{quality_metrics['stations']} stations"
    )
    return quality_metrics
