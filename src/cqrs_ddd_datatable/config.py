"""DataTableConfig: page-size limits plus export and cache settings."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DownloadConfig(BaseModel):
    """Settings for the export layer; not read by the core."""

    model_config = ConfigDict(frozen=True)

    max_execution_time: int = Field(default=1800, ge=0)  # seconds
    default_filename: str = "export"
    default_format: str = "xlsx"


class CacheConfig(BaseModel):
    """Settings for result caching; not read by the core."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    ttl: int = Field(default=300, ge=0)  # seconds
    prefix: str = "datatable"


class DataTableConfig(BaseModel):
    """Configuration for :class:`~cqrs_ddd_datatable.service.DataTableService`.

    Attributes:
        default_items_per_page: Page size used when the request gives none.
        max_items_per_page: Upper bound enforced by setters and ingestion.
        download: Export settings.
        cache: Result cache settings.
    """

    model_config = ConfigDict(frozen=True)

    default_items_per_page: int = Field(default=10, ge=1)
    max_items_per_page: int = Field(default=100, ge=1)
    download: DownloadConfig = Field(default_factory=DownloadConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)

    @model_validator(mode="after")
    def _default_within_max(self) -> DataTableConfig:
        if self.default_items_per_page > self.max_items_per_page:
            raise ValueError(
                "default_items_per_page cannot exceed max_items_per_page"
            )
        return self

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> DataTableConfig:
        """Validate a plain mapping (e.g. a loaded settings file section)."""
        return cls.model_validate(dict(data))
