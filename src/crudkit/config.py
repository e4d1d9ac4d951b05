"""
Pagination settings loaded from the environment.

``CRUD_ITEMS_COUNT_PER_PAGE`` sets the default page size and
``CRUD_MAX_ITEMS_COUNT_PER_PAGE`` the largest page size a request may ask
for.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CrudSettings(BaseSettings):
    """Page-size configuration shared by every request declaration."""

    model_config = SettingsConfigDict(
        env_prefix="CRUD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    items_count_per_page: int = Field(default=20, gt=0)
    max_items_count_per_page: int = Field(default=100, gt=0)

    @model_validator(mode="after")
    def _check_bounds(self) -> CrudSettings:
        if self.items_count_per_page > self.max_items_count_per_page:
            raise ValueError(
                "items_count_per_page must not exceed max_items_count_per_page"
            )
        return self


@lru_cache
def get_settings() -> CrudSettings:
    return CrudSettings()
