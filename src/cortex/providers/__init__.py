"""Cloud provider lookups."""

from cortex.providers.aws import get_account_id

__all__ = ["get_account_id"]
