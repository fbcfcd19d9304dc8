"""
Application configuration management for the sequence/structure sync viewer.

This module exposes the ``AppConfig`` class which centralizes reading and
validating settings from multiple sources in the following precedence:

1. Explicit keyword arguments (tests, embedding hosts).
2. Environment variables (``SEQUENCE_SYNC_`` prefix, ``__`` for nesting,
   e.g. ``SEQUENCE_SYNC_HIGHLIGHT__HOVER_DEBOUNCE_MS=80``).
3. User configuration file (``~/.sequence_sync/config.json`` by default).
4. Default settings bundled with the project (``data/default_settings.json``).

The configuration is decomposed into focused sub-models so the selection
core, the highlight bridge and the grid each only see what they need.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel, Field, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from model.selection_types import Constraints, SelectionMode


DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parent.parent / "data" / "default_settings.json"
DEFAULT_USER_CONFIG_PATH = Path.home() / ".sequence_sync" / "config.json"


class SelectionSettings(BaseModel):
    """Initial selection mode and constraints."""

    mode: SelectionMode = SelectionMode.RANGE
    max_selections: Optional[int] = Field(None, ge=0)
    max_range_size: Optional[int] = Field(None, ge=1)
    allowed_chains: Optional[List[str]] = None

    def to_constraints(self) -> Constraints:
        return Constraints(
            max_selections=self.max_selections,
            max_range_size=self.max_range_size,
            allowed_chains=frozenset(self.allowed_chains) if self.allowed_chains is not None else None,
        )


class HighlightSettings(BaseModel):
    """Renderer bridge behaviour."""

    hover_debounce_ms: int = Field(150, ge=0)
    use_auth_numbering: bool = True
    auto_focus: bool = False
    max_regions: Optional[int] = Field(50, ge=1)


class GridSettings(BaseModel):
    """Residue grid layout."""

    residues_per_row: int = Field(40, ge=1)
    cell_width: int = Field(24, ge=4)
    cell_height: int = Field(24, ge=4)
    cell_gap: int = Field(1, ge=0)
    show_positions: bool = True
    show_chain_labels: bool = True
    numbering_interval: int = Field(5, ge=1)


class ColorPaletteSettings(BaseModel):
    """User-customizable colors with sensible defaults."""

    background: str = "#FFFFFF"
    foreground: str = "#000000"
    selection: str = "#FFD700"
    hover: str = "#245F73"
    provisional: str = "#FFE680"
    residue_colors: Dict[str, str] = Field(default_factory=dict)


class DataSourceSettings(BaseModel):
    """Configuration for sequence retrieval."""

    type: str = Field("rcsb", description="Data source type: file or rcsb")
    config: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("type")
    @classmethod
    def validate_type(cls, value: str) -> str:
        allowed = {"file", "rcsb"}
        if value not in allowed:
            raise ValueError(f"Unsupported data source type '{value}'. Allowed: {allowed}")
        return value


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level '{value}'")
        return value


class _JsonFileSource(PydanticBaseSettingsSource):
    """Settings source reading one JSON file; missing files contribute nothing."""

    def __init__(self, settings_cls: Type[BaseSettings], path: Path):
        super().__init__(settings_cls)
        self.path = Path(path)

    def get_field_value(self, field: FieldInfo, field_name: str) -> Tuple[Any, str, bool]:
        # Values are supplied all at once through __call__
        return None, field_name, False

    def __call__(self) -> Dict[str, Any]:
        if self.path.exists():
            return _load_json_settings(self.path)
        return {}


class AppConfig(BaseSettings):
    """Central application configuration.

    The class leverages ``BaseSettings`` to merge explicit values, environment
    variables, user overrides, and bundled defaults into a single typed
    interface.
    """

    model_config = SettingsConfigDict(
        env_prefix="SEQUENCE_SYNC_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    selection: SelectionSettings = Field(default_factory=SelectionSettings)
    highlight: HighlightSettings = Field(default_factory=HighlightSettings)
    grid: GridSettings = Field(default_factory=GridSettings)
    color_palette: ColorPaletteSettings = Field(default_factory=ColorPaletteSettings)
    data_source: DataSourceSettings = Field(default_factory=DataSourceSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    # Tracks the resolved user configuration path so helper classes can persist
    # user edits (e.g., custom colors) back to disk.
    user_config_path: Path = Field(default=DEFAULT_USER_CONFIG_PATH, exclude=True)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        init_kwargs = getattr(init_settings, "init_kwargs", {}) or {}
        user_path = Path(init_kwargs.get("user_config_path", DEFAULT_USER_CONFIG_PATH))
        return (
            init_settings,
            env_settings,
            _JsonFileSource(settings_cls, user_path),
            _JsonFileSource(settings_cls, DEFAULT_SETTINGS_PATH),
        )

    def save_user_settings(self) -> None:
        """Persist the current configuration to the user config path.

        Only stores serializable settings to keep the file lean.
        """

        payload = json.loads(self.model_dump_json(exclude={"user_config_path"}))
        _write_json_settings(self.user_config_path, payload)


def _load_json_settings(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in settings file '{path}'") from exc


def _write_json_settings(path: Path, data: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
