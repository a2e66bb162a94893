"""Platform abstraction layer."""

from .files import atomic_write_bytes
from .process import (
    DefaultProcessRunner,
    ProcessError,
    ProcessRunner,
    run,
    run_silent,
)

__all__ = [
    # files
    "atomic_write_bytes",
    # process
    "DefaultProcessRunner",
    "ProcessError",
    "ProcessRunner",
    "run",
    "run_silent",
]
