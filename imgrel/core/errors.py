"""Process exit codes.

The exit code is the only machine-readable signal a release run produces,
so these values must remain stable.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the release CLI.

    - 0: every requested component was released
    - 1: a component workflow failed, or the invocation was invalid
    - 2: environment error (missing tools, unreadable configuration)
    """

    OK = 0
    RELEASE_FAILED = 1
    ENV_ERROR = 2
