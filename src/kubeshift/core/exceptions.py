class KubeShiftError(Exception):
    """Base exception for kubeshift."""

    pass


class ConfigurationError(KubeShiftError):
    """Raised when the cluster collaborators cannot be set up."""

    pass


class DiscoveryError(KubeShiftError):
    """Raised when the API discovery refresh fails."""

    pass


class ListError(KubeShiftError):
    """Raised when listing objects of a kind fails."""

    pass


class CastError(KubeShiftError):
    """Raised when an object or field does not have the expected shape."""

    pass


class FieldNotFoundError(KubeShiftError):
    """Raised when a field path is absent from an object."""

    pass


class ResourceLookupError(KubeShiftError):
    """Raised when a typed lookup fails for a reason other than absence."""

    pass


class NotFoundError(ResourceLookupError):
    """Raised when a referenced object does not exist."""

    pass


class ObjectProcessingError(KubeShiftError):
    """Raised when evaluating whether an object should be collected fails."""

    pass


class SanitizationError(KubeShiftError):
    """Raised when an object cannot be prepared for re-creation."""

    pass


class BackupLocationError(KubeShiftError):
    """Raised when a backup location cannot be resolved."""

    pass
