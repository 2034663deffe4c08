"""Site Forge - bootstrap pipeline for static site builds."""

__version__ = "0.1.0"
__author__ = "Site Forge Team"
__description__ = "Page discovery, plugin hooks and page registry bootstrap for static site builds"
