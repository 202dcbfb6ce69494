"""Errors raised by the compatibility checks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Optional

if TYPE_CHECKING:
    from preflight.core.models import GroupVersion


FORCE_HINT = "Use the --force flag to ignore this"


class PreflightError(RuntimeError):
    """Base class for every failure surfaced to the caller."""


class ClusterConnectionError(PreflightError):
    """Raised when a discovery client cannot be built for the configured cluster."""


class DiscoveryFailedError(PreflightError):
    """Raised when server discovery failed outright."""

    def __init__(self, message: str, *, cause: Optional[str] = None):
        super().__init__(message)
        self.cause = cause if cause is not None else message


class GroupDiscoveryFailedError(DiscoveryFailedError):
    """Raised when discovery of a group version the decision depends on failed."""

    def __init__(self, message: str, *, groups: Mapping["GroupVersion", str]):
        super().__init__(message)
        self.groups = dict(groups)


class VersionQueryError(PreflightError):
    """Raised when the server version could not be retrieved."""


class UnsupportedConfigurationError(PreflightError):
    """Raised when a requested setting is not supported by the server version."""

    def __init__(self, message: str, *, value: str, major: int, minor: int):
        super().__init__(message)
        self.value = value
        self.major = major
        self.minor = minor


class ValuesFileError(PreflightError):
    """Raised when a values document cannot be read or parsed."""
