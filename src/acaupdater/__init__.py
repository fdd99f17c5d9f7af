"""
acaupdater - Azure Container App image update step
"""

__version__ = "0.1.0"

from .core import ContainerAppImageUpdater
from .errors import (
    ConfigurationError,
    NotFoundError,
    OperationFailedError,
    RemoteError,
    UpdaterError,
)

__all__ = [
    "ContainerAppImageUpdater",
    "ConfigurationError",
    "NotFoundError",
    "OperationFailedError",
    "RemoteError",
    "UpdaterError",
]
