"""
Transformation Layer Schemas

Polars schemas for the tabular views derived from the merged dataset.
"""

import polars as pl

RECORD_KEYS_SCHEMA = pl.Schema(
    [
        ("sample_number", pl.String()),
        ("extraction_date", pl.String()),
        ("measuring_point", pl.String()),
        ("date", pl.Date()),
    ]
)

STATION_SERIES_SCHEMA = pl.Schema(
    [
        ("date", pl.Date()),
        ("value", pl.Float64()),
    ]
)

STATION_SUMMARY_SCHEMA = pl.Schema(
    [
        ("measuring_point", pl.String()),
        ("records", pl.UInt32()),
        ("first_date", pl.Date()),
        ("last_date", pl.Date()),
        ("mean_value", pl.Float64()),
    ]
)
