"""Configuration management for site-forge."""

import os
from pathlib import Path
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field, ValidationError, field_validator
from dotenv import load_dotenv
import yaml

from site_forge.exceptions import ConfigLoadError


class AppConfig(BaseModel):
    """Application configuration."""
    log_level: str = Field(default="INFO")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()


class DiscoveryConfig(BaseModel):
    """Auto-page discovery configuration."""
    pages_dir: str = Field(default="pages")
    extensions: List[str] = Field(default_factory=lambda: [".js", ".jsx", ".cjsx"])
    template_marker: str = Field(default="PAGE_TEMPLATE")
    # False keeps plugin-declared pages when discovery finds the same route
    override_existing: bool = Field(default=True)

    @field_validator('extensions')
    @classmethod
    def normalize_extensions(cls, v):
        """Ensure every extension carries its leading dot."""
        if not v:
            raise ValueError("At least one page extension is required")
        return [ext if ext.startswith(".") else f".{ext}" for ext in v]

    @field_validator('template_marker')
    @classmethod
    def validate_template_marker(cls, v):
        """Template marker must be a non-empty token."""
        if not v.strip():
            raise ValueError("Template marker cannot be empty")
        return v


class BuildConfig(BaseModel):
    """Bootstrap build configuration."""
    max_concurrency: int = Field(default=8)
    strict_copy: bool = Field(default=False)
    intermediate_dir: str = Field(default=".intermediate-build")
    template_dir: Optional[str] = Field(default=None)

    @field_validator('max_concurrency')
    @classmethod
    def validate_max_concurrency(cls, v):
        """At least one handler has to be able to run."""
        if v < 1:
            raise ValueError("max_concurrency must be at least 1")
        return v


class Settings(BaseModel):
    """Main configuration class."""
    app: AppConfig = Field(default_factory=AppConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)

    @classmethod
    def load_config(cls, config_overrides: Optional[Dict[str, Any]] = None) -> "Settings":
        """
        Load configuration from multiple sources with proper precedence:
        1. Command-line arguments (highest priority)
        2. YAML configuration file
        3. Environment variables
        4. .env file values
        5. Default values (lowest priority)
        """
        load_dotenv()

        yaml_config = cls._load_yaml_config()

        config_data: Dict[str, Any] = {}

        env_config = cls._load_env_config()
        config_data = cls._merge_config(config_data, env_config)

        if yaml_config:
            config_data = cls._merge_config(config_data, yaml_config)

        if config_overrides:
            config_data = cls._merge_config(config_data, config_overrides)

        return cls(**config_data)

    @classmethod
    def _load_yaml_config(cls) -> Optional[Dict[str, Any]]:
        """Load configuration from YAML file."""
        config_paths = [
            Path("./site_forge.yaml"),
            Path("./config.yaml"),
            Path.home() / ".site_forge.yaml"
        ]

        for config_path in config_paths:
            if config_path.exists():
                try:
                    with open(config_path, 'r') as f:
                        return yaml.safe_load(f)
                except yaml.YAMLError as e:
                    raise ValueError(f"Error parsing YAML config file {config_path}: {e}")
                except OSError as e:
                    raise ValueError(f"Error reading config file {config_path}: {e}")

        return None

    @classmethod
    def _load_env_config(cls) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config = {}

        app_config = {}
        if os.getenv("LOG_LEVEL"):
            app_config["log_level"] = os.getenv("LOG_LEVEL")
        if app_config:
            config["app"] = app_config

        discovery_config = {}
        if os.getenv("SITE_FORGE_PAGES_DIR"):
            discovery_config["pages_dir"] = os.getenv("SITE_FORGE_PAGES_DIR")
        if discovery_config:
            config["discovery"] = discovery_config

        build_config = {}
        if os.getenv("SITE_FORGE_MAX_CONCURRENCY"):
            build_config["max_concurrency"] = os.getenv("SITE_FORGE_MAX_CONCURRENCY")
        if os.getenv("SITE_FORGE_STRICT_COPY"):
            build_config["strict_copy"] = os.getenv("SITE_FORGE_STRICT_COPY")
        if build_config:
            config["build"] = build_config

        return config

    @classmethod
    def _merge_config(cls, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Merge configuration dictionaries recursively."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = cls._merge_config(result[key], value)
            else:
                result[key] = value

        return result


def get_settings(config_overrides: Optional[Dict[str, Any]] = None) -> Settings:
    """
    Get application settings with optional overrides.

    Raises:
        ConfigLoadError: If any configuration source is malformed or invalid
    """
    try:
        return Settings.load_config(config_overrides)
    except (ValueError, ValidationError) as e:
        raise ConfigLoadError(f"Invalid site-forge settings: {e}") from e
