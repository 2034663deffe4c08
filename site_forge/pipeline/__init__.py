"""
Bootstrap pipeline: the orchestrator and build directory preparation.
"""

from site_forge.pipeline.orchestrator import BootstrapOrchestrator, bootstrap, run_bootstrap
from site_forge.pipeline.scaffold import prepare_build_directory

__all__ = [
    'BootstrapOrchestrator',
    'bootstrap',
    'run_bootstrap',
    'prepare_build_directory',
]
