"""Error types raised by multitarget."""


class MultiTargetError(Exception):
    """Base class for all multitarget errors."""


class ConfigurationError(MultiTargetError, ValueError):
    """Raised during setup, before any child build is scheduled."""


class ChildBuildError(MultiTargetError):
    """Raised by a build engine when a child build pipeline fails."""
