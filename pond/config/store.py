"""Runtime configuration store.

Resolves the active ``PondConfig`` from three layers, lowest precedence
first: the base configuration, the selected theme and user overrides (the
equivalent of menu toggles). Changes that should repopulate the pond bump
``epoch``; the environment compares epochs each frame and resets when it
sees a new one.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from pond.config.pond_config import PondConfig, deep_merge
from pond.config.themes import DEFAULT_THEME, THEMES
from pond.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ConfigStore:
    """Holds the active pond configuration.

    Usage:
        store = ConfigStore(theme="night")
        store.config.fish.follow_distance
        store.apply_overrides({"fish": {"draw_simplified": True}})
        store.set_theme("sakura")   # bumps epoch, environment resets
    """

    def __init__(
        self,
        base: Optional[PondConfig] = None,
        theme: str = DEFAULT_THEME,
        themes: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ) -> None:
        self._base = base or PondConfig()
        self._themes: Dict[str, Mapping[str, Any]] = dict(THEMES if themes is None else themes)
        self._require_theme(theme)
        self._theme = theme
        self._overrides: Dict[str, Any] = {}
        self._epoch = 0
        self._config = self._resolve(self._overrides)

    @property
    def config(self) -> PondConfig:
        """The active, read-only configuration snapshot."""
        return self._config

    @property
    def theme(self) -> str:
        return self._theme

    @property
    def theme_names(self) -> list:
        return list(self._themes)

    @property
    def epoch(self) -> int:
        """Incremented whenever the pond should be repopulated."""
        return self._epoch

    @property
    def overrides(self) -> Dict[str, Any]:
        return deep_merge({}, self._overrides)

    def _require_theme(self, name: str) -> None:
        if name not in self._themes:
            raise ConfigurationError(f"Unknown theme '{name}'. Available: {', '.join(self._themes)}")

    def _resolve(self, overrides: Mapping[str, Any]) -> PondConfig:
        themed = self._base.with_overrides(self._themes[self._theme])
        return themed.with_overrides(overrides) if overrides else themed

    def _bump_epoch(self, reason: str) -> None:
        self._epoch += 1
        logger.info("Configuration epoch %d (%s)", self._epoch, reason)

    def set_theme(self, name: str) -> None:
        """Switch theme, discarding user overrides.

        Selecting the current theme is a no-op.

        Raises:
            ConfigurationError: If the theme is unknown.
        """
        if name == self._theme:
            return
        self._require_theme(name)
        previous = self._theme
        self._theme = name
        try:
            self._config = self._resolve({})
        except ConfigurationError:
            self._theme = previous
            raise
        self._overrides = {}
        self._bump_epoch(f"theme '{name}'")

    def cycle_theme(self) -> str:
        """Select the next theme in definition order and return its name."""
        names = self.theme_names
        next_name = names[(names.index(self._theme) + 1) % len(names)]
        self.set_theme(next_name)
        return next_name

    def apply_overrides(self, overrides: Mapping[str, Any]) -> PondConfig:
        """Layer user overrides over the theme without resetting the pond.

        Raises:
            ConfigurationError: If the merged result is invalid; the store
                is left unchanged.
        """
        merged = deep_merge(self._overrides, overrides)
        self._config = self._resolve(merged)
        self._overrides = merged
        return self._config

    def clear_overrides(self) -> PondConfig:
        self._overrides = {}
        self._config = self._resolve({})
        return self._config

    def load_file(self, path: Union[str, Path]) -> PondConfig:
        """Load a JSON file as the new base configuration.

        The file holds config sections at the top level, plus optional
        ``themes`` (extra or replacement themes) and ``selected_theme``.

        Raises:
            ConfigurationError: If the file cannot be read or is invalid.
        """
        filepath = Path(path)
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {filepath}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {filepath} must contain a JSON object")

        extra_themes = data.pop("themes", {})
        selected_theme = data.pop("selected_theme", self._theme)
        if not isinstance(extra_themes, dict):
            raise ConfigurationError(f"'themes' in {filepath} must be an object")

        themes = dict(self._themes)
        themes.update(extra_themes)
        if selected_theme not in themes:
            raise ConfigurationError(f"Unknown selected_theme '{selected_theme}' in {filepath}")

        base = PondConfig.from_dict(data)
        previous = (self._base, self._themes, self._theme)
        self._base, self._themes, self._theme = base, themes, selected_theme
        try:
            self._config = self._resolve(self._overrides)
        except ConfigurationError:
            self._base, self._themes, self._theme = previous
            raise

        logger.info("Loaded configuration from %s", filepath)
        self._bump_epoch(f"file {filepath.name}")
        return self._config
