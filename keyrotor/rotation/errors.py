"""Rotation error types."""


class RotationError(Exception):
    """Base exception for rotation failures."""
    pass


class RecoveryExhausted(RotationError):
    """No artifact could be decoded with any available key fragment.

    Requires a manual reseed of the key file and/or fallback artifact.
    """
    pass


class VerificationFailure(RotationError):
    """Re-encoded artifact did not decode back to the recovered payload."""
    pass


class RetentionDeleteError(RotationError):
    """An expired snapshot could not be deleted. Non-fatal."""

    def __init__(self, name: str, cause: Exception):
        super().__init__(f"Failed to delete expired snapshot {name}: {cause}")
        self.name = name
        self.cause = cause
