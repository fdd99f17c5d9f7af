"""Shared constants for acaupdater."""

CONTAINER_APP_PROVIDER = "Microsoft.App"
CONTAINER_APP_RESOURCE_TYPE = "containerApps"
CONTAINER_APP_API_VERSION = "2025-01-01"

SUBSCRIPTION_ENV_VAR = "AZURE_SUBSCRIPTION_ID"
SUBSCRIPTION_SOURCES = ("environment", "cli")
AZ_ACCOUNT_SHOW_CMD = ["az", "account", "show", "--query", "id", "--output", "tsv"]
AZ_CLI_TIMEOUT = 60.0

DEFAULT_POLLING_INTERVAL = 30.0
DEFAULT_CONFIG_FILE = ".acaupdater.yml"

STATUS_SUCCEEDED = "Succeeded"
FAILED_STATES = ("Failed", "Canceled", "Cancelled")

OUTPUT_STATUS = "status"
OUTPUT_CONTAINER_APP = "container-app"
