"""
Tests for the command line entry point and its exit codes
"""

import json
from unittest.mock import patch

import pytest

from wastewater_pipeline.errors import RemoteError
from wastewater_pipeline.load.local_storage import JsonFileStore
from wastewater_pipeline.main import main


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("wastewater_pipeline.main.setup_logging"):
        yield


@pytest.fixture
def mock_client():
    with patch(
        "wastewater_pipeline.orchestration.incremental_pipeline.HygieneMonitorClient"
    ) as client_cls:
        yield client_cls.return_value


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "data.json"


def test_run_writes_store_and_exits_zero(store_path, mock_client, make_record, capsys):
    mock_client.fetch_window.return_value = [
        make_record("S-2", "02.02.2022"),
        make_record("S-1", "01.02.2022"),
    ]

    exit_code = main(["--store", str(store_path), "run", "--today", "2023-01-01"])

    assert exit_code == 0
    stored = JsonFileStore(store_path).read()
    assert [r["sample_number"] for r in stored] == ["S-1", "S-2"]
    assert "total records: 2" in capsys.readouterr().out


def test_run_with_nothing_new_exits_zero(store_path, mock_client, make_record):
    existing = [make_record("S-1", "15.03.2023")]
    JsonFileStore(store_path).save(existing)
    before = store_path.read_bytes()
    mock_client.fetch_window.return_value = []

    exit_code = main(["--store", str(store_path), "run", "--today", "2023-04-10"])

    assert exit_code == 0
    assert store_path.read_bytes() == before


def test_remote_failure_exits_one(store_path, mock_client, capsys):
    mock_client.fetch_window.side_effect = RemoteError(
        "API request failed with status 500: Internal Server Error", status_code=500
    )

    exit_code = main(["--store", str(store_path), "run"])

    assert exit_code == 1
    assert "status 500" in capsys.readouterr().err
    assert not store_path.exists()


def test_dry_run_does_not_write(store_path, mock_client, make_record):
    mock_client.fetch_window.return_value = [make_record("S-1", "01.02.2022")]

    exit_code = main(["--store", str(store_path), "run", "--dry-run"])

    assert exit_code == 0
    assert not store_path.exists()


def test_backfill_command(store_path, mock_client, capsys):
    mock_client.fetch_window.return_value = []

    exit_code = main(
        ["--store", str(store_path), "backfill", "--today", "2022-03-10"]
    )

    assert exit_code == 0
    assert mock_client.fetch_window.call_count == 2
    assert capsys.readouterr().out.count("No new unique data") == 2


def test_status_command(store_path, make_record, capsys):
    JsonFileStore(store_path).save([make_record("S-1", "15.03.2023")])

    exit_code = main(["--store", str(store_path), "status"])

    assert exit_code == 0
    status = json.loads(capsys.readouterr().out)
    assert status["total_records"] == 1
    assert status["latest_extraction_date"] == "2023-03-15"


def test_stations_and_series_commands(store_path, tmp_path, make_record, capsys):
    JsonFileStore(store_path).save(
        [
            make_record("S-1", "01.02.2022", "Ruhleben", results=(2, 4)),
            make_record("S-2", "08.02.2022", "Ruhleben", results=(6,)),
        ]
    )

    assert main(["--store", str(store_path), "stations"]) == 0
    assert "Ruhleben" in capsys.readouterr().out

    csv_path = tmp_path / "ruhleben.csv"
    assert (
        main(["--store", str(store_path), "series", "Ruhleben", "--output", str(csv_path)])
        == 0
    )
    assert csv_path.read_text().splitlines() == [
        "date,value",
        "2022-02-01,3.0",
        "2022-02-08,6.0",
    ]

    assert main(["--store", str(store_path), "series", "Nowhere"]) == 1


def test_series_output_to_missing_directory_exits_one(
    store_path, tmp_path, make_record, capsys
):
    JsonFileStore(store_path).save([make_record("S-1", "01.02.2022", "Ruhleben")])
    csv_path = tmp_path / "nope" / "ruhleben.csv"

    exit_code = main(
        ["--store", str(store_path), "series", "Ruhleben", "--output", str(csv_path)]
    )

    assert exit_code == 1
    assert f"Cannot write {csv_path}" in capsys.readouterr().err
    assert not csv_path.exists()


def test_export_command(store_path, tmp_path, make_record):
    records = [make_record("S-1", "01.02.2022")]
    JsonFileStore(store_path).save(records)
    payload = tmp_path / "public" / "data.json"

    exit_code = main(["--store", str(store_path), "export", "--output", str(payload)])

    assert exit_code == 0
    assert json.loads(payload.read_text(encoding="utf-8")) == {"body": records}


def test_invalid_today_is_a_usage_error(store_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["--store", str(store_path), "run", "--today", "10.04.2023"])

    assert excinfo.value.code == 2
