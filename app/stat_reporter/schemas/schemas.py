from typing import Any

from pydantic import BaseModel, Field


class StatsFile(BaseModel):
    # Values stay raw; integer parsing happens per stat during extraction.
    stats: dict[str, dict[str, Any]] = Field(default_factory=dict)
    DataVersion: int | None = None


class MojangProfile(BaseModel):
    id: str | None = None
    name: str
