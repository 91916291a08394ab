"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``DISPATCHKIT_*`` prefix
  3. TOML file    — ``dispatchkit.toml`` discovered via walk-up
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from dispatchkit.config.discovery import resolve_config
from dispatchkit.config.models import (
    ChainConfig,
    ClockConfig,
    PluginsConfig,
    PricingConfig,
    RegistryConfig,
    ScenarioConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``dispatchkit.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class DispatchSettings(BaseSettings):
    """Unified settings for the dispatchkit CLI.

    Stored on the :class:`AppContext` at the CLI root and read by every
    command when it builds its discipline instance.

    Attributes:
        root: Directory of the discovered config file, or CWD.
        config_path: Config file actually loaded, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "DISPATCHKIT_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    keep_going: bool = False

    # --- TOML sections ---
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    clock: ClockConfig = Field(default_factory=ClockConfig)
    pricing: PricingConfig = Field(default_factory=PricingConfig)
    chain: ChainConfig = Field(default_factory=ChainConfig)
    scenario: ScenarioConfig = Field(default_factory=ScenarioConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @property
    def halt_on_error(self) -> bool:
        """``--keep-going`` wins over the ``[scenario]`` setting."""
        return self.scenario.halt_on_error and not self.keep_going

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> DispatchSettings:
        """Construct settings from CLI invocation.

        Discovers ``dispatchkit.toml`` via walk-up (or explicit
        *config_path*) and merges CLI flags as highest-priority overrides.
        """
        toml_path = resolve_config(config_path, root)

        resolved_root = root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None
