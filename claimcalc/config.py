"""Configuration loading and validation for claimcalc.

Reads an optional YAML file and produces a validated ClaimCalcConfig
object. Any policy table may be overridden; unspecified tables keep the
university defaults.
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from claimcalc.policy import ArpsPolicy, IncentivePolicy

logger = logging.getLogger(__name__)


class InstitutionConfig(BaseModel):
    """Institution metadata."""

    name: str = "Parul University"


class ClaimCalcConfig(BaseModel):
    """Top-level claimcalc configuration."""

    institution: InstitutionConfig = Field(default_factory=InstitutionConfig)
    incentives: IncentivePolicy = Field(default_factory=IncentivePolicy)
    arps: ArpsPolicy = Field(default_factory=ArpsPolicy)


def load_config(config_path: str | Path | None = None) -> ClaimCalcConfig:
    """Load and validate a claimcalc YAML configuration file.

    Args:
        config_path: Path to the YAML config file. None returns the
            built-in policy defaults.

    Returns:
        Validated ClaimCalcConfig instance.

    Raises:
        FileNotFoundError: If the config file does not exist.
        yaml.YAMLError: If the YAML is malformed.
        pydantic.ValidationError: If the config fails validation.
    """
    if config_path is None:
        return ClaimCalcConfig()

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    config = ClaimCalcConfig.model_validate(raw)
    logger.info(
        "Loaded config for %s with %d special-policy faculties from %s",
        config.institution.name,
        len(config.incentives.special_policy_faculties),
        path,
    )
    return config
