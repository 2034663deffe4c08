"""Per-site configuration read from ``site-config.yaml``."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from site_forge.exceptions import ConfigLoadError

logger = logging.getLogger(__name__)

SITE_CONFIG_FILENAMES = ("site-config.yaml", "site-config.yml")


class PluginSpec(BaseModel):
    """A plugin entry from the site configuration."""

    resolve: str = Field(..., description="Importable module name of the plugin")
    options: Dict[str, Any] = Field(default_factory=dict, description="Options handed to the plugin's hooks")

    @field_validator('resolve')
    @classmethod
    def validate_resolve(cls, v):
        """Module name cannot be blank."""
        if not v or not v.strip():
            raise ValueError("Plugin 'resolve' cannot be empty")
        return v.strip()


class SiteConfig(BaseModel):
    """Site configuration: metadata, plugins and schema builder."""

    site_metadata: Dict[str, Any] = Field(default_factory=dict)
    plugins: List[PluginSpec] = Field(default_factory=list)
    schema_builder: Optional[str] = Field(
        default=None, description="Custom schema builder as 'module:callable'"
    )

    @field_validator('plugins', mode='before')
    @classmethod
    def coerce_plugins(cls, v):
        """Allow bare module names alongside {resolve, options} mappings."""
        if v is None:
            return []
        return [{"resolve": item} if isinstance(item, str) else item for item in v]

    @field_validator('schema_builder')
    @classmethod
    def validate_schema_builder(cls, v):
        """Schema builder must look like 'module:callable'."""
        if v is None:
            return v
        module, sep, attr = v.partition(":")
        if not sep or not module or not attr:
            raise ValueError("schema_builder must be of the form 'module:callable'")
        return v


def find_site_config(directory: Union[str, Path]) -> Optional[Path]:
    """Return the site config file inside ``directory`` if there is one."""
    root = Path(directory)
    for filename in SITE_CONFIG_FILENAMES:
        candidate = root / filename
        if candidate.is_file():
            return candidate
    return None


def load_site_config(directory: Union[str, Path]) -> SiteConfig:
    """
    Load and validate the site configuration of a program directory.

    Args:
        directory: Site root directory

    Returns:
        Validated SiteConfig

    Raises:
        ConfigLoadError: If the file is missing, unreadable, or invalid
    """
    config_path = find_site_config(directory)
    if config_path is None:
        raise ConfigLoadError(
            f"Couldn't find a site config in {directory} "
            f"(expected one of: {', '.join(SITE_CONFIG_FILENAMES)})"
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Couldn't parse {config_path}: {e}") from e
    except OSError as e:
        raise ConfigLoadError(f"Couldn't open {config_path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigLoadError(f"{config_path} must contain a mapping at the top level")

    try:
        site_config = SiteConfig(**raw)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid site config {config_path}: {e}") from e

    logger.debug(f"Loaded site config from {config_path} ({len(site_config.plugins)} plugins)")
    return site_config
