"""Adapters for processes, files and the CI agent."""

from relci.platform.ci import CircleCiAgent, HaltFailed, JobHalterProtocol
from relci.platform.files import atomic_write_text
from relci.platform.process import ProcessError, run

__all__ = [
    # ci
    "CircleCiAgent",
    "HaltFailed",
    "JobHalterProtocol",
    # files
    "atomic_write_text",
    # process
    "ProcessError",
    "run",
]
