"""Translation of Azure SDK exceptions into acaupdater errors."""

from azure.core.exceptions import AzureError, HttpResponseError

from acaupdater.errors import RemoteError
from acaupdater.errors_catalog import actionable_error


def describe(exc: AzureError) -> str:
    """Return the most specific reason the service gave for ``exc``."""
    if isinstance(exc, HttpResponseError):
        odata = getattr(exc, "error", None)
        if odata is not None and getattr(odata, "message", None):
            code = getattr(odata, "code", None)
            return f"{code}: {odata.message}" if code else odata.message
    message = getattr(exc, "message", None) or str(exc)
    return message.strip().splitlines()[0] if message.strip() else exc.__class__.__name__


def remote_error(action: str, exc: AzureError) -> RemoteError:
    return RemoteError(actionable_error("remote_call_failed", action=action, detail=describe(exc)))
