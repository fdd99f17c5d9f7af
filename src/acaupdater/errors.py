"""Domain errors for acaupdater."""


class UpdaterError(RuntimeError):
    """Raised when the update cannot continue safely."""


class ConfigurationError(UpdaterError):
    """A required input or resolved value is missing or invalid."""


class NotFoundError(UpdaterError):
    """A named Azure resource does not exist."""


class RemoteError(UpdaterError):
    """The Azure control plane rejected or failed a request."""


class OperationFailedError(UpdaterError):
    """The long-running update reached a non-success terminal state."""
