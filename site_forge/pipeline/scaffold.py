"""Preparation of the intermediate build directory."""

import logging
import shutil
from pathlib import Path
from typing import Optional

from site_forge.config.settings import BuildConfig
from site_forge.exceptions import FileCopyError

logger = logging.getLogger(__name__)

JSON_DIRNAME = "json"


def prepare_build_directory(directory: Path, config: Optional[BuildConfig] = None) -> Path:
    """
    Copy the build template into the site and create the json output folder.

    Args:
        directory: Site root directory
        config: Build settings (intermediate_dir, template_dir, strict_copy)

    Returns:
        Path of the intermediate build directory

    Raises:
        FileCopyError: Only when ``strict_copy`` is enabled; otherwise copy
            failures are logged and the build carries on
    """
    config = config or BuildConfig()
    target = Path(directory) / config.intermediate_dir

    try:
        if config.template_dir:
            source = Path(config.template_dir)
            if not source.is_absolute():
                source = Path(directory) / source
            shutil.copytree(source, target, dirs_exist_ok=True)
            logger.debug(f"Copied build template {source} -> {target}")
        (target / JSON_DIRNAME).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        error = FileCopyError(f"Unable to prepare {target}: {e}")
        if config.strict_copy:
            raise error from e
        logger.error(f"{error} (continuing, strict_copy is off)")

    return target
