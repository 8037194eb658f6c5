"""
Bundle Module.

This module wires the connector together: it loads and validates the
configuration once at startup and hands it, along with an HTTP client, to
the REST API service.
"""

import logging
from typing import Optional

from connect_rest_api.client import HttpClient, HttpxClient
from connect_rest_api.config import ALIAS, Config
from connect_rest_api.service import ConnectRestApiService


logger = logging.getLogger(__name__)

__all__ = ["ALIAS", "create_service"]


def create_service(
    config: Optional[Config] = None,
    client: Optional[HttpClient] = None,
    config_file: Optional[str] = None,
) -> ConnectRestApiService:
    """Build a ready-to-use REST API service.

    Args:
        config: Configuration provider. Loaded from config_file (or the
            default locations) when omitted.
        client: HTTP client capability. An HttpxClient is created when omitted.
        config_file: Path to a YAML configuration file, used only when config
            is not given.

    Returns:
        ConnectRestApiService: The configured service.

    Raises:
        ConfigurationError: If the credentials are missing or empty.
    """
    if config is None:
        config = Config(config_file)
    config.validate()

    if client is None:
        client = HttpxClient()

    logger.info(f"{ALIAS} service created")
    return ConnectRestApiService(client=client, config=config)
