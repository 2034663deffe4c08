"""Bootstrap models: program config, state machine states, and results."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Union

from site_forge.config.settings import Settings
from site_forge.config.site import SiteConfig
from site_forge.models.registry import PageRegistry


class BuildState(str, Enum):
    """Bootstrap states, in the order they are entered."""

    INIT = "init"
    SCHEMA_READY = "schema_ready"
    COLLECT_PAGES = "collect_pages"
    AUTO_DISCOVER = "auto_discover"
    POST_CREATE = "post_create"
    HAND_OFF = "hand_off"
    FAILED = "failed"

    @property
    def order(self) -> int:
        return _STATE_ORDER.index(self) if self in _STATE_ORDER else len(_STATE_ORDER)

    @property
    def is_terminal(self) -> bool:
        return self in (BuildState.HAND_OFF, BuildState.FAILED)


_STATE_ORDER = [
    BuildState.INIT,
    BuildState.SCHEMA_READY,
    BuildState.COLLECT_PAGES,
    BuildState.AUTO_DISCOVER,
    BuildState.POST_CREATE,
    BuildState.HAND_OFF,
]


@dataclass
class ProgramConfig:
    """Everything the bootstrap needs to know about the site being built."""

    directory: Union[str, Path]
    settings: Settings = field(default_factory=Settings)
    # Loaded from <directory>/site-config.yaml when not given
    site_config: Optional[SiteConfig] = None

    def __post_init__(self):
        self.directory = Path(self.directory).resolve()

    @property
    def pages_directory(self) -> Path:
        return self.directory / self.settings.discovery.pages_dir

    @property
    def intermediate_directory(self) -> Path:
        return self.directory / self.settings.build.intermediate_dir


@dataclass
class BootstrapStatistics:
    """Counts and timings collected while bootstrapping."""

    plugin_pages: int = 0
    discovered_pages: int = 0
    overridden_pages: int = 0
    total_pages: int = 0
    plugins: int = 0
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    errors: List[str] = field(default_factory=list)

    @property
    def duration(self) -> float:
        """
        Calculate total execution time in seconds.

        Returns:
            Duration in seconds, or 0 if not yet complete
        """
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return 0.0


GraphQLRunner = Callable[..., Awaitable[Any]]


@dataclass
class BootstrapResult:
    """What a successful bootstrap hands back to its caller."""

    schema: Any
    pages: PageRegistry
    graphql: GraphQLRunner
    stats: BootstrapStatistics
    state: BuildState = BuildState.HAND_OFF
