"""Cluster configuration models."""

import hashlib
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from cortex.configreader import (
    BoolValidation,
    FieldValidation,
    Int64PtrValidation,
    Int64Validation,
    PromptItemValidation,
    PromptValidation,
    StringPtrValidation,
    StringValidation,
    StructValidation,
    first_error,
    validate_struct,
)
from cortex.consts import CORTEX_VERSION, DEFAULT_IMAGE_REGISTRY
from cortex.errors import ConfigErrors, InstanceTypeTooSmallError, InvalidAWSCredentialsError
from cortex.utils.table import align_key_value


logger = logging.getLogger(__name__)

# (access key id, secret access key, region) -> (account id, credentials valid)
AccountIDLookup = Callable[[str, str, str], Tuple[str, bool]]

BUCKET_PREFIX = "cortex-"
BUCKET_HASH_LENGTH = 10

DEFAULT_INSTANCE_TYPE = "m5.large"
DEFAULT_MIN_INSTANCES = 2
DEFAULT_MAX_INSTANCES = 5

TOO_SMALL_INSTANCE_SUFFIXES = ("nano", "micro", "small")

# Fields left unset by file defaulting; the operator confirms them interactively
PROMPTED_KEYS = ("instance_type", "min_instances", "max_instances")

# Credentials may live in the cluster config file but never become config fields
CREDENTIAL_KEYS = [
    "aws_access_key_id",
    "aws_secret_access_key",
    "cortex_aws_access_key_id",
    "cortex_aws_secret_access_key",
]

IMAGE_REPOSITORIES = [
    ("image_predictor_serve", "predictor-serve"),
    ("image_predictor_serve_gpu", "predictor-serve-gpu"),
    ("image_tf_serve", "tf-serve"),
    ("image_tf_serve_gpu", "tf-serve-gpu"),
    ("image_tf_api", "tf-api"),
    ("image_onnx_serve", "onnx-serve"),
    ("image_onnx_serve_gpu", "onnx-serve-gpu"),
    ("image_operator", "operator"),
    ("image_manager", "manager"),
    ("image_downloader", "downloader"),
    ("image_cluster_autoscaler", "cluster-autoscaler"),
    ("image_metrics_server", "metrics-server"),
    ("image_nvidia", "nvidia"),
    ("image_fluentd", "fluentd"),
    ("image_statsd", "statsd"),
    ("image_istio_proxy", "istio-proxy"),
    ("image_istio_pilot", "istio-pilot"),
    ("image_istio_citadel", "istio-citadel"),
    ("image_istio_galley", "istio-galley"),
]


def validate_instance_type(instance_type: str) -> str:
    """Reject instance types too small to schedule cluster workloads."""
    if instance_type.endswith(TOO_SMALL_INSTANCE_SUFFIXES):
        raise InstanceTypeTooSmallError(instance_type)
    return instance_type


def cluster_validation(version: str = CORTEX_VERSION) -> StructValidation:
    """Build the rule table for a cluster config file.
    
    Image defaults are pinned to ``version``.
    """
    struct_fields = [
        FieldValidation(
            key="instance_type",
            validation=StringPtrValidation(custom_validator=validate_instance_type),
        ),
        FieldValidation(key="min_instances", validation=Int64PtrValidation(greater_than=0)),
        FieldValidation(key="max_instances", validation=Int64PtrValidation(greater_than=0)),
        FieldValidation(key="cluster_name", validation=StringValidation(default="cortex")),
        FieldValidation(key="region", validation=StringValidation(default="us-west-2")),
        FieldValidation(key="bucket", validation=StringValidation(default="", allow_empty=True)),
        FieldValidation(key="log_group", validation=StringValidation(default="cortex")),
        FieldValidation(
            key="instance_volume_size",
            validation=Int64Validation(
                default=50,
                greater_than_or_equal_to=20,  # room for docker images and runtime overhead
                less_than_or_equal_to=16384,
            ),
        ),
        FieldValidation(key="telemetry", validation=BoolValidation(default=True)),
    ]
    
    for key, repository in IMAGE_REPOSITORIES:
        struct_fields.append(
            FieldValidation(
                key=key,
                validation=StringValidation(default=f"{DEFAULT_IMAGE_REGISTRY}/{repository}:{version}"),
            )
        )
        
    return StructValidation(struct_fields=struct_fields, ignored_keys=CREDENTIAL_KEYS)


VALIDATION = cluster_validation()


def prompt_validation(
    skip_populated_fields: bool,
    prompt_instance_type: bool,
    defaults: Optional["ClusterConfig"] = None,
) -> PromptValidation:
    """Build the interactive prompts for sizing fields.
    
    Values already set on ``defaults`` become the suggested answers; otherwise
    m5.large, 2 and 5 are suggested.
    """
    instance_type = DEFAULT_INSTANCE_TYPE
    min_instances = DEFAULT_MIN_INSTANCES
    max_instances = DEFAULT_MAX_INSTANCES
    if defaults is not None:
        if defaults.instance_type is not None:
            instance_type = defaults.instance_type
        if defaults.min_instances is not None:
            min_instances = defaults.min_instances
        if defaults.max_instances is not None:
            max_instances = defaults.max_instances
            
    items = []
    if prompt_instance_type:
        items.append(
            PromptItemValidation(
                key="instance_type",
                prompt="AWS instance type",
                validation=StringPtrValidation(
                    required=True,
                    default=instance_type,
                    custom_validator=validate_instance_type,
                ),
            )
        )
        
    items.extend([
        PromptItemValidation(
            key="min_instances",
            prompt="Min instances",
            validation=Int64PtrValidation(required=True, default=min_instances, greater_than=0),
        ),
        PromptItemValidation(
            key="max_instances",
            prompt="Max instances",
            validation=Int64PtrValidation(required=True, default=max_instances, greater_than=0),
        ),
    ])
    
    return PromptValidation(skip_populated_fields=skip_populated_fields, items=items)


def bucket_name(account_id: str) -> str:
    """Deterministic bucket name for an AWS account."""
    digest = hashlib.sha256(account_id.encode()).hexdigest()
    return BUCKET_PREFIX + digest[:BUCKET_HASH_LENGTH]


class ClusterConfig(BaseModel):
    """User-facing cluster configuration.
    
    Fields hold zero values until a validation pass fills them. The sizing
    fields stay ``None`` until the file or the operator supplies them.
    """
    model_config = ConfigDict(extra="ignore")
    
    instance_type: Optional[str] = None
    min_instances: Optional[int] = None
    max_instances: Optional[int] = None
    cluster_name: str = ""
    region: str = ""
    bucket: str = ""
    log_group: str = ""
    instance_volume_size: int = 0
    telemetry: bool = False
    image_predictor_serve: str = ""
    image_predictor_serve_gpu: str = ""
    image_tf_serve: str = ""
    image_tf_serve_gpu: str = ""
    image_tf_api: str = ""
    image_onnx_serve: str = ""
    image_onnx_serve_gpu: str = ""
    image_operator: str = ""
    image_manager: str = ""
    image_downloader: str = ""
    image_cluster_autoscaler: str = ""
    image_metrics_server: str = ""
    image_nvidia: str = ""
    image_fluentd: str = ""
    image_statsd: str = ""
    image_istio_proxy: str = ""
    image_istio_pilot: str = ""
    image_istio_citadel: str = ""
    image_istio_galley: str = ""
    
    @classmethod
    def from_document(
        cls,
        document: Optional[Dict[str, Any]],
        validation: StructValidation = VALIDATION,
    ) -> "ClusterConfig":
        """Validate a loaded document, raising every field error at once."""
        config = cls()
        errors = validate_struct(config, document, validation)
        if errors:
            raise ConfigErrors(errors)
        return config
        
    @property
    def is_resolved(self) -> bool:
        """Whether every prompted field and the bucket are set."""
        return all(getattr(self, key) is not None for key in PROMPTED_KEYS) and self.bucket != ""
        
    def set_bucket(
        self,
        aws_access_key_id: str,
        aws_secret_access_key: str,
        lookup: Optional[AccountIDLookup] = None,
    ):
        """Derive the bucket name from the AWS account unless one is set."""
        if self.bucket != "":
            return
            
        if lookup is None:
            from cortex.providers.aws import get_account_id
            lookup = get_account_id
            
        account_id, valid_creds = lookup(aws_access_key_id, aws_secret_access_key, self.region)
        if not valid_creds:
            raise InvalidAWSCredentialsError()
            
        self.bucket = bucket_name(account_id)
        logger.info(f"Using bucket {self.bucket}")


def set_file_defaults(config: ClusterConfig, validation: StructValidation = VALIDATION):
    """Apply file defaults to ``config``.
    
    Prompted fields are not defaulted here.
    """
    errors = validate_struct(config, {}, validation)
    error = first_error(errors)
    if error is not None:
        raise error


def get_file_defaults(validation: StructValidation = VALIDATION) -> ClusterConfig:
    """Cluster config holding only file defaults."""
    config = ClusterConfig()
    set_file_defaults(config, validation)
    return config


class ResolvedClusterConfig(ClusterConfig):
    """Read-only cluster config held by an InternalClusterConfig."""
    model_config = ConfigDict(frozen=True)


def _display(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


class InternalClusterConfig(BaseModel):
    """Resolved cluster configuration with identity assigned at admission."""
    model_config = ConfigDict(frozen=True)
    
    cluster_config: ClusterConfig
    id: str
    api_version: str = CORTEX_VERSION
    operator_in_cluster: bool = False
    
    @field_validator("cluster_config")
    @classmethod
    def validate_resolved(cls, v: ClusterConfig) -> ClusterConfig:
        """Only a fully resolved cluster config can acquire an identity."""
        unset = [key for key in PROMPTED_KEYS if getattr(v, key) is None]
        if v.bucket == "":
            unset.append("bucket")
        if unset:
            raise ValueError(f"cluster config is not fully resolved: {', '.join(unset)} not set")
        return ResolvedClusterConfig(**v.model_dump())
        
    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "InternalClusterConfig":
        """Build from the flattened form produced by ``to_document``."""
        document = dict(document)
        identity = {
            key: document.pop(key)
            for key in ("id", "api_version", "operator_in_cluster")
            if key in document
        }
        return cls(cluster_config=ClusterConfig.from_document(document), **identity)
        
    def to_document(self) -> Dict[str, Any]:
        """Flattened mapping: cluster config keys plus identity keys."""
        document = self.cluster_config.model_dump()
        document["id"] = self.id
        document["api_version"] = self.api_version
        document["operator_in_cluster"] = self.operator_in_cluster
        return document
        
    def table_items(self) -> List[Tuple[str, Any]]:
        """Ordered label/value pairs for operator confirmation."""
        cc = self.cluster_config
        items = [
            ("cluster version", self.api_version),
            ("instance type", cc.instance_type),
            ("min instances", cc.min_instances),
            ("max instances", cc.max_instances),
            ("cluster name", cc.cluster_name),
            ("region", cc.region),
            ("bucket", cc.bucket),
            ("log group", cc.log_group),
            ("instance volume size", cc.instance_volume_size),
            ("telemetry", cc.telemetry),
        ]
        for key, _ in IMAGE_REPOSITORIES:
            items.append((key, getattr(cc, key)))
        return items
        
    def __str__(self) -> str:
        items = [(label, _display(value)) for label, value in self.table_items()]
        return align_key_value(items, ":", 1)
