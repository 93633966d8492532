"""
Cortex cluster configuration.

Validation, defaulting and interactive resolution of the configuration used
to bootstrap a cortex cluster.
"""

from cortex.consts import CORTEX_VERSION

__version__ = CORTEX_VERSION

# Re-export key components for easier access
from cortex.models.cluster import ClusterConfig, InternalClusterConfig

__all__ = [
    "ClusterConfig",
    "InternalClusterConfig",
]
