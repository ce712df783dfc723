import pytest


@pytest.fixture
def make_record():
    """
    Factory for raw API records shaped like the hygiene-monitor payload.
    """

    def _make(
        sample_number,
        extraction_date,
        measuring_point="Waßmannsdorf",
        results=(12.5, 17.5),
        **extra,
    ):
        record = {
            "sample_number": sample_number,
            "extraction_date": extraction_date,
            "measuring_point": measuring_point,
            "results": [
                {
                    "name": "SARS-CoV-2",
                    "parameter": [
                        {"name": f"gene_{i}", "result": value, "unit": "copies/L"}
                        for i, value in enumerate(results)
                    ],
                }
            ],
        }
        record.update(extra)
        return record

    return _make


class FakeFetcher:
    """Records fetch_window calls and answers from a callable or a fixed list."""

    def __init__(self, response=None):
        self.response = response if response is not None else []
        self.calls = []

    def fetch_window(self, start, end):
        self.calls.append((start, end))
        if callable(self.response):
            return self.response(start, end)
        return list(self.response)


@pytest.fixture
def fake_fetcher():
    return FakeFetcher
