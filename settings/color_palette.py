"""
Color palette management for the residue grid.

The :class:`ColorPalette` class reads user-provided colors from
:class:`settings.config.AppConfig` on top of the built-in residue colors
(grouped by chemical property). User updates can be persisted back to the
user configuration file, keeping the rest of the application decoupled from
storage concerns.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping

from .config import AppConfig, _write_json_settings


RESIDUE_GROUPS: Mapping[str, str] = MappingProxyType(
    {
        "nonpolar": "AGILMPV",
        "polar": "CNQST",
        "aromatic": "FWY",
        "acidic": "DE",
        "basic": "HKR",
    }
)

GROUP_COLORS: Mapping[str, str] = MappingProxyType(
    {
        "nonpolar": "#7A8B99",
        "polar": "#4C9A7F",
        "aromatic": "#8E6BB8",
        "acidic": "#C0504D",
        "basic": "#3C6EB4",
    }
)

UNKNOWN_RESIDUE_COLOR = "#9E9E9E"


def default_residue_colors() -> Dict[str, str]:
    return {
        code: GROUP_COLORS[group]
        for group, codes in RESIDUE_GROUPS.items()
        for code in codes
    }


class ColorPalette:
    """Access and mutate user-customizable colors."""

    def __init__(self, config: AppConfig):
        self._config = config
        self._colors = self._build()

    def _build(self) -> Mapping[str, str]:
        palette = self._config.color_palette
        residue_colors = default_residue_colors()
        residue_colors.update({k.upper(): v for k, v in palette.residue_colors.items()})
        self._residue_colors = MappingProxyType(residue_colors)
        # Read-only view so callers cannot mutate the palette behind our back
        return MappingProxyType(
            {
                "background": palette.background,
                "foreground": palette.foreground,
                "selection": palette.selection,
                "hover": palette.hover,
                "provisional": palette.provisional,
            }
        )

    def get_background_color(self) -> str:
        return self._colors["background"]

    def get_foreground_color(self) -> str:
        return self._colors["foreground"]

    def get_selection_color(self) -> str:
        return self._colors["selection"]

    def get_hover_color(self) -> str:
        return self._colors["hover"]

    def get_provisional_color(self) -> str:
        return self._colors["provisional"]

    def get_residue_color(self, code: str) -> str:
        """Return the fill color of a one-letter residue code."""

        return self._residue_colors.get(code.upper(), UNKNOWN_RESIDUE_COLOR)

    def set_custom_color(self, key: str, value: str) -> None:
        """Persist a custom color to the user configuration file.

        ``key`` is either a named color (background, selection, ...) or a
        one-letter residue code. The change is written to disk immediately
        and reflected in the underlying :class:`AppConfig` instance.
        """

        palette = self._config.color_palette
        if key in {"background", "foreground", "selection", "hover", "provisional"}:
            setattr(palette, key, value)
        elif len(key) == 1:
            updated = dict(palette.residue_colors)
            updated[key.upper()] = value
            palette.residue_colors = updated
        else:
            raise KeyError(f"Unknown color key '{key}'")

        payload = self._config.model_dump(mode="json", exclude={"user_config_path"})
        _write_json_settings(self._config.user_config_path, payload)
        self._colors = self._build()
