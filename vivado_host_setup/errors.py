from __future__ import annotations


class SetupError(RuntimeError):
    """Base class for every condition that aborts (or re-prompts) the setup."""


class PreflightFailed(SetupError):
    pass


class AbortedByUser(SetupError):
    pass


class SettingsNotFound(SetupError):
    pass


class UnsupportedSettingsSchema(SetupError):
    pass


class PathOutsideWorkdir(SetupError, ValueError):
    pass


class UnrecognizedChecksum(SetupError):
    pass


class PermissionDenied(SetupError):
    pass


class ExternalToolFailure(SetupError):
    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode
