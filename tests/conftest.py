"""Shared fixtures for site-forge tests."""

from pathlib import Path
from typing import Dict, Optional

import pytest
import yaml


@pytest.fixture
def anyio_backend():
    """Run async tests on asyncio only."""
    return "asyncio"


def write_files(root: Path, files: Dict[str, str]) -> None:
    """Create files (and parent directories) under root."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


@pytest.fixture
def write_tree():
    """Expose write_files to tests."""
    return write_files


@pytest.fixture
def make_site(tmp_path):
    """Factory for a site directory with a config and page files."""

    def _make_site(pages=(), config: Optional[dict] = None, extra_files: Optional[Dict[str, str]] = None) -> Path:
        site = tmp_path / "site"
        site.mkdir(exist_ok=True)
        (site / "site-config.yaml").write_text(
            yaml.safe_dump(config if config is not None else {"site_metadata": {"title": "Test Site"}}),
            encoding="utf-8",
        )
        write_files(site / "pages", {name: "export default () => null\n" for name in pages})
        if extra_files:
            write_files(site, extra_files)
        return site

    return _make_site
