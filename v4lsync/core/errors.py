"""Domain-specific errors for v4lsync.

Device and persistence failures are never raised; they surface as empty reads,
false writes and log records. These errors cover configuration and input
mistakes only.
"""


class V4lsyncError(Exception):
    """Base error for v4lsync."""


class ProfileValidationError(V4lsyncError):
    """Raised when a device profile does not conform to schema or semantics."""


class ProfileLoadError(V4lsyncError):
    """Raised when reading profile sources fails."""


class ProfileSelectionError(V4lsyncError):
    """Raised when the requested device profile id is unknown."""


class DuplicateKeyError(V4lsyncError):
    """Raised when a YAML document repeats a mapping key."""


class AttributeResolutionError(V4lsyncError):
    """Raised when a revision field cannot be found in the profile."""


class ValueValidationError(V4lsyncError):
    """Raised when an edited value does not fit the attribute's kind."""


class EngineStateError(V4lsyncError):
    """Raised when the engine is used before it holds a current revision."""
