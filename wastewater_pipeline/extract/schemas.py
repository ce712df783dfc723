"""
Extract Layer Schemas

Raw record schema for data coming from the hygiene-monitor open-data API.
Validation only: records are stored as the raw JSON objects received, so
extra upstream fields are allowed and preserved.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..coreutils.time import parse_extraction_date


class ParameterReading(BaseModel):
    """Single measured parameter inside a result panel"""

    model_config = ConfigDict(extra="allow")

    result: Optional[Union[int, float, str]] = Field(
        None, description="Measured value, numeric or textual (e.g. '< LOD')"
    )


class ResultPanel(BaseModel):
    """Named panel of parameter readings"""

    model_config = ConfigDict(extra="allow")

    parameter: List[ParameterReading] = Field(default_factory=list)


class WastewaterRecord(BaseModel):
    """One measurement submission from the open-data API"""

    model_config = ConfigDict(extra="allow")

    sample_number: Union[int, str] = Field(..., description="Opaque sample identifier")
    extraction_date: str = Field(..., description="Extraction date as 'dd.mm.yyyy'")
    measuring_point: str = Field(..., description="Sampling station identifier")
    results: List[ResultPanel] = Field(default_factory=list)

    @field_validator("sample_number")
    @classmethod
    def validate_sample_number(cls, v):
        if isinstance(v, str) and not v.strip():
            raise ValueError("sample_number must not be empty")
        return v

    @field_validator("extraction_date")
    @classmethod
    def validate_extraction_date(cls, v):
        """Extraction date must be 'dd.mm.yyyy'; the text itself is kept as-is"""
        try:
            parse_extraction_date(v)
        except ValueError:
            raise ValueError(f"extraction_date must be dd.mm.yyyy, got {v!r}")
        return v

    @field_validator("measuring_point")
    @classmethod
    def validate_measuring_point(cls, v):
        if not v.strip():
            raise ValueError("measuring_point must not be empty")
        return v
