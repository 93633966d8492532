"""Pydantic models for cluster configuration."""

from cortex.models.cluster import (
    ClusterConfig,
    InternalClusterConfig,
    get_file_defaults,
    prompt_validation,
    set_file_defaults,
    validate_instance_type,
)
from cortex.models.credentials import AWSCredentials, resolve_credentials
from cortex.models.settings import CliSettings

__all__ = [
    "ClusterConfig",
    "InternalClusterConfig",
    "get_file_defaults",
    "prompt_validation",
    "set_file_defaults",
    "validate_instance_type",
    "AWSCredentials",
    "resolve_credentials",
    "CliSettings",
]
