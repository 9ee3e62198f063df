"""Configuration management using Pydantic settings."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from uhi_engine.clusters.cluster import LatLng
from uhi_engine.surfaces.base import SurfaceConfig
from uhi_engine.zones import ZoneBreakpoints, ZoneScheme


class Settings(BaseSettings):
    """Application settings loaded from environment variables (``UHI_`` prefix)."""

    model_config = SettingsConfigDict(
        env_prefix="UHI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "UHI Explorer"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Map surface: "folium", "deck" or "placeholder"
    map_surface: Literal["folium", "deck", "placeholder"] = "folium"
    map_token: Optional[str] = None     # empty keeps the static placeholder
    map_style: str = "mapbox/dark-v11"
    map_container: str = "uhi-map"

    # Camera
    map_center_lat: float = 19.7515
    map_center_lng: float = 75.7139
    overview_zoom: float = 7.0
    detail_zoom: float = 10.0
    focus_duration: float = 1.5         # seconds

    # Zones: primary metric and ascending breakpoints (cold|warm|mod-hot|hot)
    zone_primary_metric: str = "intensity"
    zone_breakpoints: tuple[float, float, float] = (7.0, 7.5, 8.0)

    # Cluster data; None uses the built-in Maharashtra set
    clusters_path: Optional[Path] = None

    @model_validator(mode="after")
    def _check_map(self) -> "Settings":
        if not self.detail_zoom > self.overview_zoom:
            raise ValueError("detail_zoom must be greater than overview_zoom")
        # Raises ValueError on non-ascending values.
        ZoneBreakpoints.from_sequence(self.zone_breakpoints)
        return self

    def surface_config(self) -> SurfaceConfig:
        return SurfaceConfig(
            token=self.map_token or None,
            center=LatLng(self.map_center_lat, self.map_center_lng),
            overview_zoom=self.overview_zoom,
            detail_zoom=self.detail_zoom,
            focus_duration=self.focus_duration,
        )

    def zone_scheme(self) -> ZoneScheme:
        return ZoneScheme(
            primary_metric=self.zone_primary_metric,
            breakpoints=ZoneBreakpoints.from_sequence(self.zone_breakpoints),
        )


settings = Settings()
