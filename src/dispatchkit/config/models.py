"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, dispatchkit.toml only contains
overrides.  An empty file (or none at all) reproduces the stock scenarios.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from dispatchkit.domain.chain import DEFAULT_LINKS
from dispatchkit.domain.registry import DuplicatePolicy
from dispatchkit.domain.strategy import DEFAULT_FLAT_RATE, DEFAULT_TIERS


class RegistryConfig(BaseModel):
    """[registry] section."""

    model_config = {"frozen": True}

    duplicates: DuplicatePolicy = DuplicatePolicy.REJECT


class ClockConfig(BaseModel):
    """[clock] section."""

    model_config = {"frozen": True}

    start_hour: int = Field(default=0, ge=0, le=23)


class PricingConfig(BaseModel):
    """[pricing] section."""

    model_config = {"frozen": True}

    flat_rate: Decimal = DEFAULT_FLAT_RATE
    tiers: dict[int, int] = Field(default_factory=lambda: dict(DEFAULT_TIERS))


class ChainLinkConfig(BaseModel):
    """One ``[[chain.links]]`` entry."""

    model_config = {"frozen": True}

    capacity: int
    label: str


class ChainConfig(BaseModel):
    """[chain] section."""

    model_config = {"frozen": True}

    links: list[ChainLinkConfig] = Field(
        default_factory=lambda: [
            ChainLinkConfig(capacity=capacity, label=label) for capacity, label in DEFAULT_LINKS
        ]
    )

    @field_validator("links")
    @classmethod
    def _non_empty(cls, value: list[ChainLinkConfig]) -> list[ChainLinkConfig]:
        if not value:
            msg = "chain.links must contain at least one link"
            raise ValueError(msg)
        return value


class ScenarioConfig(BaseModel):
    """[scenario] section."""

    model_config = {"frozen": True}

    halt_on_error: bool = True


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str = ".dispatchkit/plugins"

