"""
Configuration for site-forge: tool settings and per-site config.
"""

from .settings import Settings, get_settings
from .site import PluginSpec, SiteConfig, load_site_config

__all__ = [
    'Settings',
    'get_settings',
    'PluginSpec',
    'SiteConfig',
    'load_site_config',
]
