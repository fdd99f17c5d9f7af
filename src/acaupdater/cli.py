import logging
import os

import click
from rich.logging import RichHandler

from .constants import DEFAULT_CONFIG_FILE, DEFAULT_POLLING_INTERVAL, SUBSCRIPTION_SOURCES
from .core import ContainerAppImageUpdater, UpdaterError
from .services.config_loader import ConfigLoader


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command()
@click.option("--app-name", envvar="INPUT_APP-NAME", help="Name of the container app to update.")
@click.option(
    "--container-name",
    envvar="INPUT_CONTAINER-NAME",
    help="Name of the container inside the app whose image is replaced.",
)
@click.option(
    "--resource-group-name",
    envvar="INPUT_RESOURCE-GROUP-NAME",
    help="Resource group that contains the container app.",
)
@click.option("--image", envvar="INPUT_IMAGE", help="New image reference (registry/repo:tag or digest).")
@click.option(
    "--subscription-id",
    envvar="INPUT_SUBSCRIPTION-ID",
    help="Subscription id used when AZURE_SUBSCRIPTION_ID (or the Azure CLI) yields nothing.",
)
@click.option(
    "--subscription-source",
    type=click.Choice(SUBSCRIPTION_SOURCES),
    default=None,
    help="Where to discover the subscription id first: the environment (default) or `az account show`.",
)
@click.option(
    "--polling-interval",
    type=float,
    default=None,
    help=f"Seconds between status checks when Azure suggests none (default: {DEFAULT_POLLING_INTERVAL:g}).",
)
@click.option(
    "--preserve-containers/--single-container",
    default=None,
    help="Send every existing container with only the target image replaced (default: single container).",
)
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_FILE} if present.",
)
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
def main(
    app_name,
    container_name,
    resource_group_name,
    image,
    subscription_id,
    subscription_source,
    polling_interval,
    preserve_containers,
    config,
    verbose,
    log_file,
):
    """Update the image of one container in an Azure Container App and wait for it."""
    logger = logging.getLogger("acaupdater")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except UpdaterError as exc:
        raise click.ClickException(str(exc)) from exc

    app_name = _resolve_option(app_name, config_values, "app_name")
    container_name = _resolve_option(container_name, config_values, "container_name")
    resource_group_name = _resolve_option(resource_group_name, config_values, "resource_group_name")
    image = _resolve_option(image, config_values, "image")
    subscription_id = _resolve_option(subscription_id, config_values, "subscription_id")
    subscription_source = str(
        _resolve_option(subscription_source, config_values, "subscription_source", default="environment")
    )
    polling_interval = float(
        _resolve_option(
            polling_interval,
            config_values,
            "polling_interval",
            default=DEFAULT_POLLING_INTERVAL,
        )
    )
    preserve_containers = bool(
        _resolve_option(preserve_containers, config_values, "preserve_containers", default=False)
    )
    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)
        # the Azure SDK logs every HTTP request at INFO
        logging.getLogger("azure").setLevel(logging.WARNING)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    try:
        updater = ContainerAppImageUpdater(
            app_name=app_name,
            container_name=container_name,
            resource_group_name=resource_group_name,
            image=image,
            subscription_id=subscription_id,
            subscription_source=subscription_source,
            polling_interval=polling_interval,
            preserve_containers=preserve_containers,
        )
    except UpdaterError as exc:
        raise click.ClickException(str(exc)) from exc

    raise SystemExit(updater.run())


if __name__ == "__main__":
    main()
