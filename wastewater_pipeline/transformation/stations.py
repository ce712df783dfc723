"""
Station Series - Transform Layer

Per-station views of the merged dataset for the dashboard: the station
list, a daily value series and a per-station summary table.
"""

import math
import polars as pl
from typing import Any, Dict, List, Optional

from ..coreutils.time import try_parse_extraction_date
from .schemas import STATION_SERIES_SCHEMA, STATION_SUMMARY_SCHEMA
import logging

logger = logging.getLogger(__name__)


def get_stations(records: List[Dict[str, Any]]) -> List[str]:
    """Unique measuring points in first-seen order"""
    stations = {}
    for record in records:
        station = record.get("measuring_point")
        if isinstance(station, str) and station:
            stations.setdefault(station, None)
    return list(stations)


def station_file_names(
    stations: List[str], suffix: str = ".csv"
) -> Dict[str, str]:
    """
    Filesystem-safe, unique file name per station

    Non-alphanumeric characters become underscores. Names that collide
    (case-insensitively) get a numeric suffix in station order.
    """
    names: Dict[str, str] = {}
    taken = set()
    for station in stations:
        base = "".join(c if c.isalnum() else "_" for c in station).strip("_")
        base = base or "station"
        name, counter = base, 1
        while name.lower() in taken:
            counter += 1
            name = f"{base}_{counter}"
        taken.add(name.lower())
        names[station] = f"{name}{suffix}"
    return names


def coerce_result(value: Any) -> Optional[float]:
    """Numeric value of a parameter result, None for text like '< LOD'"""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def record_value(record: Dict[str, Any]) -> Optional[float]:
    """
    Mean of the numeric readings in the first result panel

    Args:
        record: Raw wastewater record

    Returns:
        Optional[float]: None when the panel holds no numeric reading
    """
    results = record.get("results")
    if not isinstance(results, list) or not results:
        return None
    panel = results[0]
    if not isinstance(panel, dict):
        return None
    parameters = panel.get("parameter")
    if not isinstance(parameters, list):
        return None

    values = [
        number
        for number in (
            coerce_result(p.get("result")) for p in parameters if isinstance(p, dict)
        )
        if number is not None
    ]
    if not values:
        return None
    return sum(values) / len(values)


def records_to_values_frame(records: List[Dict[str, Any]]) -> pl.DataFrame:
    """Flatten records into measuring_point, date and value columns"""
    rows = [
        {
            "measuring_point": record.get("measuring_point"),
            "date": try_parse_extraction_date(record.get("extraction_date")),
            "value": record_value(record),
        }
        for record in records
        if isinstance(record.get("measuring_point"), str)
    ]
    return pl.DataFrame(
        rows,
        schema={"measuring_point": pl.String(), "date": pl.Date(), "value": pl.Float64()},
    )


def station_series(records: List[Dict[str, Any]], station: str) -> pl.DataFrame:
    """
    Daily value series for one station

    Records without a parseable date or without a numeric reading are
    dropped.

    Args:
        records: Merged dataset
        station: measuring_point to select

    Returns:
        pl.DataFrame: date/value rows sorted by date
    """
    df = records_to_values_frame(records)
    series = (
        df.filter(pl.col("measuring_point") == station)
        .drop_nulls(["date", "value"])
        .select(["date", "value"])
        .sort("date", maintain_order=True)
    )
    logger.info(f"Station {station}: {series.height} data points")
    return series.cast(STATION_SERIES_SCHEMA)


def station_summary(records: List[Dict[str, Any]]) -> pl.DataFrame:
    """
    One summary row per station

    Returns:
        pl.DataFrame: records, first/last date and mean value per station,
            in first-seen station order
    """
    df = records_to_values_frame(records)
    summary = df.group_by("measuring_point", maintain_order=True).agg(
        [
            pl.len().alias("records"),
            pl.col("date").min().alias("first_date"),
            pl.col("date").max().alias("last_date"),
            pl.col("value").mean().alias("mean_value"),
        ]
    )
    return summary.cast(STATION_SUMMARY_SCHEMA)
