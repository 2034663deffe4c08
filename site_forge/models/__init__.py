"""Data models for pages, the page registry and the bootstrap."""

from .page import Page, coerce_page
from .registry import MergePolicy, PageRegistry, as_registry, merge_pages
from .build import BootstrapResult, BootstrapStatistics, BuildState, ProgramConfig

__all__ = [
    'Page',
    'coerce_page',
    'MergePolicy',
    'PageRegistry',
    'merge_pages',
    'as_registry',
    'BootstrapResult',
    'BootstrapStatistics',
    'BuildState',
    'ProgramConfig',
]
