"""
Connect REST API - Package.

This package provides a service for calling REST APIs with HTTP Basic
Authentication, configured from YAML and environment variables.
"""

__version__ = '0.1.0'

from connect_rest_api.bundle import ALIAS, create_service
from connect_rest_api.client import HttpClient, HttpxClient
from connect_rest_api.config import Config, init_logging
from connect_rest_api.exceptions import (
    ConfigurationError,
    ConnectRestApiError,
    HttpFailure,
    InvalidArgumentError,
    TransportFailure,
)
from connect_rest_api.service import SUPPORTED_METHODS, ConnectRestApiService

__all__ = [
    "ALIAS",
    "Config",
    "ConfigurationError",
    "ConnectRestApiError",
    "ConnectRestApiService",
    "HttpClient",
    "HttpFailure",
    "HttpxClient",
    "InvalidArgumentError",
    "SUPPORTED_METHODS",
    "TransportFailure",
    "create_service",
    "init_logging",
]
