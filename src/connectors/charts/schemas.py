# src/connectors/charts/schemas.py
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List


class NamedRef(BaseModel):
    id: str = ""
    name: str = ""

    @field_validator("id", "name", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> str:
        return "" if value is None else str(value)


class ChartGroup(BaseModel):
    geo: List[NamedRef] = Field(default_factory=list)
    types: List[NamedRef] = Field(default_factory=list)

    @field_validator("geo", "types", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class ChartsDocument(BaseModel):
    """Body of GET toplist/charts."""

    charts: List[ChartGroup] = Field(alias="Charts")


class Toplist(BaseModel):
    # Rows stay loose, the normalizer decides which ones are usable
    result: List[Any] = Field(default_factory=list)


class ToplistDocument(BaseModel):
    """Body of GET toplist/{chart_id}/."""

    toplist: Toplist


def row_fields(row: Any) -> Dict[str, str]:
    """Return the string fields of a result row, or {} if it is not a mapping."""
    if not isinstance(row, dict):
        return {}
    return {
        key: "" if row.get(key) is None else str(row.get(key))
        for key in ("title", "artist", "name")
        if key in row
    }
