"""AWS credentials supplied alongside a cluster config."""

import os
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from cortex.errors import MissingCredentialsError


class AWSCredentials(BaseModel):
    """Credentials for the operator's AWS account.
    
    The cortex pair is used by the cluster itself and falls back to the
    operator's pair when not given separately.
    """
    model_config = ConfigDict(frozen=True)
    
    aws_access_key_id: str
    aws_secret_access_key: str
    cortex_aws_access_key_id: str
    cortex_aws_secret_access_key: str


def _lookup(document: Mapping[str, Any], env: Mapping[str, str], key: str) -> Optional[str]:
    value = document.get(key)
    if value:
        return str(value)
    value = env.get(key.upper())
    if value:
        return value
    return None


def resolve_credentials(
    document: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> AWSCredentials:
    """Collect credentials from the config document, then the environment."""
    document = document or {}
    if env is None:
        env = os.environ
        
    access_key_id = _lookup(document, env, "aws_access_key_id")
    secret_access_key = _lookup(document, env, "aws_secret_access_key")
    if access_key_id is None or secret_access_key is None:
        raise MissingCredentialsError(
            "AWS credentials not found; set aws_access_key_id and aws_secret_access_key "
            "in the cluster config or AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY in the environment"
        )
        
    cortex_access_key_id = _lookup(document, env, "cortex_aws_access_key_id")
    cortex_secret_access_key = _lookup(document, env, "cortex_aws_secret_access_key")
    if cortex_access_key_id is None or cortex_secret_access_key is None:
        cortex_access_key_id = access_key_id
        cortex_secret_access_key = secret_access_key
        
    return AWSCredentials(
        aws_access_key_id=access_key_id,
        aws_secret_access_key=secret_access_key,
        cortex_aws_access_key_id=cortex_access_key_id,
        cortex_aws_secret_access_key=cortex_secret_access_key,
    )
