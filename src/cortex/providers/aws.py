"""AWS account identity lookup."""

import logging
from typing import Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from cortex.errors import AccountLookupError


logger = logging.getLogger(__name__)

# STS error codes that mean the credentials themselves were rejected
INVALID_CREDENTIALS_CODES = {
    "InvalidClientTokenId",
    "SignatureDoesNotMatch",
    "AccessDenied",
    "UnrecognizedClientException",
    "ExpiredToken",
}


def get_account_id(
    aws_access_key_id: str,
    aws_secret_access_key: str,
    region: str,
) -> Tuple[str, bool]:
    """Return the account id for a credential pair and whether the pair is valid.
    
    Rejected credentials come back as ``("", False)``. Any other failure is
    raised as AccountLookupError.
    """
    client = boto3.client(
        "sts",
        aws_access_key_id=aws_access_key_id,
        aws_secret_access_key=aws_secret_access_key,
        region_name=region,
    )
    
    try:
        response = client.get_caller_identity()
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code", "")
        if code in INVALID_CREDENTIALS_CODES:
            logger.debug(f"AWS rejected credentials: {code}")
            return "", False
        raise AccountLookupError(f"failed to look up AWS account: {e}") from e
    except BotoCoreError as e:
        raise AccountLookupError(f"failed to look up AWS account: {e}") from e
        
    return response["Account"], True
