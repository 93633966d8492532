"""Tests for cluster configuration models."""

import hashlib
from unittest.mock import MagicMock

import pytest

from cortex.consts import CORTEX_VERSION
from cortex.errors import (
    ConfigErrors,
    InstanceTypeTooSmallError,
    InvalidAWSCredentialsError,
)
from cortex.models.cluster import (
    CREDENTIAL_KEYS,
    IMAGE_REPOSITORIES,
    ClusterConfig,
    bucket_name,
    cluster_validation,
    get_file_defaults,
    prompt_validation,
    set_file_defaults,
    validate_instance_type,
)


ACCOUNT_ID = "123456789012"


def _expected_bucket(account_id: str) -> str:
    return "cortex-" + hashlib.sha256(account_id.encode()).hexdigest()[:10]


class TestFileDefaults:
    """Test defaults applied from an empty document."""
    
    def test_defaults(self):
        """Test every non-prompted field gets its documented default."""
        config = ClusterConfig.from_document({})
        
        assert config.cluster_name == "cortex"
        assert config.region == "us-west-2"
        assert config.bucket == ""
        assert config.log_group == "cortex"
        assert config.instance_volume_size == 50
        assert config.telemetry is True
        
    def test_prompted_fields_unset(self):
        """Test sizing fields are never defaulted from the file."""
        config = get_file_defaults()
        
        assert config.instance_type is None
        assert config.min_instances is None
        assert config.max_instances is None
        
    def test_image_defaults_pinned_to_version(self):
        """Test image references default to the running version."""
        config = ClusterConfig.from_document(None)
        
        assert len(IMAGE_REPOSITORIES) == 19
        for key, repository in IMAGE_REPOSITORIES:
            assert getattr(config, key) == f"cortexlabs/{repository}:{CORTEX_VERSION}"
            
    def test_version_injected(self):
        """Test the rule table can be built for another version."""
        config = get_file_defaults(cluster_validation("9.9.9"))
        assert config.image_operator == "cortexlabs/operator:9.9.9"
        
    def test_set_file_defaults_keeps_prompted_values(self):
        """Test set_file_defaults leaves prompted fields unset."""
        config = ClusterConfig()
        set_file_defaults(config)
        
        assert config.cluster_name == "cortex"
        assert config.min_instances is None


class TestFromDocument:
    """Test ClusterConfig.from_document."""
    
    def test_supplied_values(self):
        """Test supplied values are kept."""
        config = ClusterConfig.from_document({
            "instance_type": "p2.xlarge",
            "min_instances": 1,
            "max_instances": 10,
            "cluster_name": "staging",
            "bucket": "my-bucket",
            "telemetry": False,
        })
        
        assert config.instance_type == "p2.xlarge"
        assert config.min_instances == 1
        assert config.max_instances == 10
        assert config.cluster_name == "staging"
        assert config.bucket == "my-bucket"
        assert config.telemetry is False
        
    @pytest.mark.parametrize("key", CREDENTIAL_KEYS)
    def test_credential_keys_ignored(self, key):
        """Test credential keys are accepted but not mapped."""
        config = ClusterConfig.from_document({key: "AKIAEXAMPLE"})
        assert config == get_file_defaults()
        
    @pytest.mark.parametrize("instance_type", ["t3.nano", "t2.micro", "t3.small", "small"])
    def test_instance_type_too_small(self, instance_type):
        """Test small instance families are rejected with a dedicated error."""
        with pytest.raises(ConfigErrors) as exc_info:
            ClusterConfig.from_document({"instance_type": instance_type})
            
        error = exc_info.value.first
        assert isinstance(error, InstanceTypeTooSmallError)
        assert error.key == "instance_type"
        
    @pytest.mark.parametrize("instance_type", ["m5.large", "t3.Small", "c5.smallish", "nano.large"])
    def test_instance_type_accepted(self, instance_type):
        """Test other instance types pass unchanged."""
        assert validate_instance_type(instance_type) == instance_type
        
    @pytest.mark.parametrize("size,valid", [(19, False), (20, True), (16384, True), (16385, False)])
    def test_volume_size_bounds(self, size, valid):
        """Test instance volume size range."""
        if valid:
            assert ClusterConfig.from_document({"instance_volume_size": size}).instance_volume_size == size
        else:
            with pytest.raises(ConfigErrors) as exc_info:
                ClusterConfig.from_document({"instance_volume_size": size})
            assert exc_info.value.first.key == "instance_volume_size"
            
    @pytest.mark.parametrize("key", ["min_instances", "max_instances"])
    def test_capacity_must_be_positive(self, key):
        """Test capacity bounds must be greater than zero."""
        with pytest.raises(ConfigErrors):
            ClusterConfig.from_document({key: 0})
            
    def test_min_greater_than_max_allowed(self):
        """Test capacity bounds are not compared with each other."""
        config = ClusterConfig.from_document({"min_instances": 10, "max_instances": 2})
        assert config.min_instances == 10
        assert config.max_instances == 2
        
    def test_all_errors_reported(self):
        """Test errors are collected in declaration order."""
        with pytest.raises(ConfigErrors) as exc_info:
            ClusterConfig.from_document({
                "telemetry": "yes",
                "instance_volume_size": 5,
                "min_instances": -1,
                "instance_type": "t2.micro",
            })
            
        keys = [e.key for e in exc_info.value.errors]
        assert keys == ["instance_type", "min_instances", "instance_volume_size", "telemetry"]
        assert str(exc_info.value) == str(exc_info.value.first)


class TestPromptValidation:
    """Test prompt_validation."""
    
    def test_builtin_defaults(self):
        """Test fallback defaults and prompt order."""
        validation = prompt_validation(False, True)
        
        assert [item.key for item in validation.items] == ["instance_type", "min_instances", "max_instances"]
        assert [item.validation.default for item in validation.items] == ["m5.large", 2, 5]
        assert validation.skip_populated_fields is False
        
    def test_instance_type_excluded(self):
        """Test instance type prompt can be disabled."""
        validation = prompt_validation(True, False)
        
        assert [item.key for item in validation.items] == ["min_instances", "max_instances"]
        assert validation.skip_populated_fields is True
        
    def test_caller_defaults(self):
        """Test caller defaults win over fallbacks and are not mutated."""
        defaults = ClusterConfig(min_instances=3)
        validation = prompt_validation(False, True, defaults)
        
        assert [item.validation.default for item in validation.items] == ["m5.large", 3, 5]
        assert defaults.instance_type is None


class TestSetBucket:
    """Test bucket name derivation."""
    
    def test_derives_from_account(self):
        """Test bucket is derived from the account id."""
        lookup = MagicMock(return_value=(ACCOUNT_ID, True))
        config = get_file_defaults()
        
        config.set_bucket("key", "secret", lookup=lookup)
        
        lookup.assert_called_once_with("key", "secret", "us-west-2")
        assert config.bucket == _expected_bucket(ACCOUNT_ID)
        assert config.bucket == bucket_name(ACCOUNT_ID)
        assert len(config.bucket) == len("cortex-") + 10
        
    def test_idempotent_when_set(self):
        """Test a set bucket is never overwritten and no lookup happens."""
        lookup = MagicMock(return_value=(ACCOUNT_ID, True))
        config = ClusterConfig.from_document({"bucket": "existing"})
        before = config.model_dump()
        
        config.set_bucket("key", "secret", lookup=lookup)
        config.set_bucket("key", "secret", lookup=lookup)
        
        lookup.assert_not_called()
        assert config.model_dump() == before
        
    def test_deterministic(self):
        """Test same account gives same bucket; different accounts differ."""
        assert bucket_name(ACCOUNT_ID) == bucket_name(ACCOUNT_ID)
        assert bucket_name(ACCOUNT_ID) != bucket_name("210987654321")
        
    def test_invalid_credentials(self):
        """Test rejected credentials raise a dedicated error."""
        config = get_file_defaults()
        with pytest.raises(InvalidAWSCredentialsError):
            config.set_bucket("key", "secret", lookup=MagicMock(return_value=("", False)))
        assert config.bucket == ""
        
    def test_lookup_failure_propagates(self):
        """Test lookup errors propagate unchanged."""
        config = get_file_defaults()
        failure = RuntimeError("network down")
        with pytest.raises(RuntimeError) as exc_info:
            config.set_bucket("key", "secret", lookup=MagicMock(side_effect=failure))
        assert exc_info.value is failure


def test_end_to_end_resolution():
    """Test validate, prompt, and bucket derivation in sequence."""
    from cortex.configreader import read_prompts
    
    config = ClusterConfig.from_document({})
    assert config.cluster_name == "cortex"
    assert config.bucket == ""
    assert config.instance_volume_size == 50
    
    answers = iter(["m5.large", 2, 5])
    read_prompts(config, prompt_validation(False, True, config), lambda label, default: next(answers))
    
    assert config.instance_type == "m5.large"
    assert config.min_instances == 2
    assert config.max_instances == 5
    
    config.set_bucket("key", "secret", lookup=lambda key, secret, region: (ACCOUNT_ID, True))
    assert config.bucket == _expected_bucket(ACCOUNT_ID)
    assert config.is_resolved
