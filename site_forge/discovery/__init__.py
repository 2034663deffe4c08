"""
Auto-page discovery and route derivation.
"""

from .paths import derive_route
from .filesystem import PageDiscovery, discover_pages

__all__ = [
    'derive_route',
    'PageDiscovery',
    'discover_pages',
]
