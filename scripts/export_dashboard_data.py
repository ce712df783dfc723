"""
Export the merged wastewater dataset for the dashboard.
Writes the {"body": [...]} payload plus one CSV series per measuring point.
"""

import sys
from pathlib import Path

import polars as pl

from wastewater_pipeline.coreutils.config import load_config
from wastewater_pipeline.load.local_storage import JsonFileStore, save_dashboard_payload
from wastewater_pipeline.transformation.stations import (
    get_stations,
    station_file_names,
    station_series,
    station_summary,
)


def export_dashboard_data(output_dir: str = "output") -> Path:
    """Export dashboard payload and per-station series"""
    print("🔄 Exporting wastewater data for the dashboard...")

    config = load_config()
    records = JsonFileStore(config.store_path).load()
    if not records:
        print(f"❌ No records in {config.store_path}, run the pipeline first")
        sys.exit(1)
    print(f"✅ Loaded {len(records):,} records from {config.store_path}")

    save_dashboard_payload(records, "public/data/data.json")
    print("✅ Wrote dashboard payload to public/data/data.json")

    series_dir = Path(output_dir) / "stations"
    series_dir.mkdir(parents=True, exist_ok=True)

    file_names = station_file_names(get_stations(records))
    for station, file_name in file_names.items():
        df = station_series(records, station)
        path = series_dir / file_name
        df.write_csv(path)
        print(f"   {station}: {df.height} points → {path}")

    # Display summary
    print("\n📋 Station summary:")
    with pl.Config(tbl_rows=-1):
        print(station_summary(records))

    return series_dir


if __name__ == "__main__":
    export_dashboard_data()
