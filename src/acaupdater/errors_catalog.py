"""Actionable error catalog for acaupdater."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "missing_input": {
        "what": "Missing required input: {names}.",
        "next": "Pass the value as an option, an action input, or in the config file.",
    },
    "subscription_not_set": {
        "what": "AZURE_SUBSCRIPTION_ID is not set and no subscription id could be resolved.",
        "next": "Export AZURE_SUBSCRIPTION_ID, pass `--subscription-id`, or log in with `az login`.",
    },
    "subscription_cli_failed": {
        "what": "Could not read the current subscription from the Azure CLI: {detail}",
        "next": "Run `az login` on the runner or use `--subscription-source environment`.",
    },
    "resource_group_not_found": {
        "what": "Resource group {resource_group} does not exist.",
        "next": "Check the resource group name and the selected subscription.",
    },
    "container_app_not_found": {
        "what": "App {app_name} does not exist in resource group {resource_group}.",
        "next": "Check the container app name and the selected subscription.",
    },
    "container_not_found": {
        "what": "Container {container_name} is not part of app {app_name} (found: {available}).",
        "next": "Use one of the existing container names or drop `--preserve-containers`.",
    },
    "remote_call_failed": {
        "what": "Azure request failed while {action}: {detail}",
        "next": "Check the identity's role assignments and the Azure service health.",
    },
    "update_result_missing": {
        "what": "Failed to update container app {app_name}. No result was returned.",
        "next": "Inspect the app's revision history in the Azure portal before retrying.",
    },
    "update_failed": {
        "what": "Update of container app {app_name} ended as {status}: {reason}",
        "next": "Inspect the failed revision's system logs, then rerun the step.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
