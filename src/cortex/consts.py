"""Release constants."""

CORTEX_VERSION = "0.10.0"

DEFAULT_IMAGE_REGISTRY = "cortexlabs"
