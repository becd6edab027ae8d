# src/wksprofile/util/errors.py: Typed exceptions and exit codes.
# Every failure the profile commands can hit maps to one exception type here,
# and every exception type carries the process exit code the CLI boundary
# should terminate with.

from enum import IntEnum


class ExitCode(IntEnum):
    """Enumeration for application exit codes."""
    OK = 0
    UNKNOWN_ERROR = 1
    CONFIG_ERROR = 2
    INVALID_ARGUMENT = 3
    PRECONDITION_FAILED = 4
    GIT_ERROR = 5
    FILESYSTEM_ERROR = 6


class WksProfileError(Exception):
    """Base exception for the application."""
    def __init__(self, message: str, exit_code: ExitCode = ExitCode.UNKNOWN_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(WksProfileError):
    """Configuration loading or validation errors."""
    def __init__(self, message: str):
        super().__init__(message, ExitCode.CONFIG_ERROR)


class InvalidURLError(WksProfileError):
    """Empty, malformed or unsupported repository URL."""
    def __init__(self, message: str):
        super().__init__(message, ExitCode.INVALID_ARGUMENT)


class ProfileNotFoundError(WksProfileError):
    """The profile directory to disable does not exist."""
    def __init__(self, message: str):
        super().__init__(message, ExitCode.PRECONDITION_FAILED)


class ProfileExistsError(WksProfileError):
    """The profile directory to enable is already populated."""
    def __init__(self, message: str):
        super().__init__(message, ExitCode.PRECONDITION_FAILED)


class GitError(WksProfileError):
    """Git command errors."""
    def __init__(self, message: str):
        super().__init__(message, ExitCode.GIT_ERROR)


class FilesystemError(WksProfileError):
    """Directory creation or removal failures."""
    def __init__(self, message: str):
        super().__init__(message, ExitCode.FILESYSTEM_ERROR)
