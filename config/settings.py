"""Configuration management for matching tolerances, geometry floors, and highlight styling."""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Fragment matching
    match_tolerance: float = Field(
        default=15.0,
        description="Matching search radius in points; a candidate is accepted below twice this value",
    )
    row_slack: float = Field(
        default=5.0,
        description="Vertical distance in points under which two fragments sort as the same reading row",
    )
    order_penalty: float = Field(
        default=10.0,
        description="Cost added per step of reading-order displacement between matched candidates",
    )

    # Fragment geometry
    min_fragment_width: float = Field(
        default=20.0,
        description="Floor applied to fragment width so degenerate fragments stay selectable",
    )
    min_fragment_height: float = Field(
        default=10.0,
        description="Floor applied to fragment height so degenerate fragments stay selectable",
    )
    default_glyph_width: float = Field(
        default=6.0,
        description="Per-character width used to estimate a fragment's width when none is reported",
    )
    default_fragment_height: float = Field(
        default=12.0,
        description="Height assumed for a fragment when neither height nor font size is reported",
    )
    invert_y: bool = Field(
        default=True,
        description=(
            "Use the extractor's vertical anchor as-is. Set to False only for extractors that "
            "report a true top-down anchor, which is then flipped against the page height."
        ),
    )

    # Classification
    coverage_ratio_threshold: float = Field(
        default=0.98,
        description="Matched fraction at or above which a fully matched page emits no regions",
    )
    dedup_epsilon: float = Field(
        default=1.0,
        description="Coordinate epsilon under which two modified pairs are considered the same",
    )

    # Diff document rendering
    highlight_opacity: float = Field(default=0.15, description="Fill opacity of highlight rectangles")
    page_border_width: float = Field(
        default=3.0,
        description="Border width drawn around pages that exist in only one version",
    )
    caption_font_size: float = Field(default=10.0, description="Font size of the old/new page caption")
    caption_offset: float = Field(
        default=20.0,
        description="Distance in points from the top edge to the caption baseline",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level used by the command line")

    model_config = SettingsConfigDict(
        env_prefix="PAGEDIFF_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def get_settings() -> Settings:
    """Return a cached settings instance."""
    return _get_settings()


@lru_cache()
def _get_settings() -> Settings:
    return Settings()


settings = get_settings()
