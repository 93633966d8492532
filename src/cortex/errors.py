"""Error types raised while resolving cluster configuration."""

from typing import List, Optional


class CortexError(Exception):
    """Base class for all cortex errors."""
    pass


class ConfigError(CortexError):
    """Configuration could not be resolved."""
    pass


class FieldError(ConfigError):
    """A configuration field violates one of its rules."""
    
    def __init__(self, message: str, key: Optional[str] = None):
        """Initialize field error."""
        super().__init__(message)
        self.message = message
        self.key = key
        
    def with_key(self, key: str) -> "FieldError":
        """Scope the error to a field if it is not scoped yet."""
        if self.key is None:
            self.key = key
        return self
        
    def __str__(self) -> str:
        if self.key:
            return f"{self.key}: {self.message}"
        return self.message


class MissingRequiredFieldError(FieldError):
    """A required field has no value and no default."""
    
    def __init__(self, key: str):
        super().__init__("must be provided", key=key)


class InstanceTypeTooSmallError(FieldError):
    """Instance type is too small to run cluster workloads."""
    
    def __init__(self, instance_type: str, key: Optional[str] = None):
        super().__init__(
            f"{instance_type} is too small; cortex does not support nano, micro, or small instances",
            key=key,
        )
        self.instance_type = instance_type


class ConfigErrors(ConfigError):
    """All field errors collected during one validation pass."""
    
    def __init__(self, errors: List[FieldError]):
        if not errors:
            raise ValueError("ConfigErrors requires at least one error")
        self.errors = list(errors)
        super().__init__(str(self.errors[0]))
        
    @property
    def first(self) -> FieldError:
        """First error in rule declaration order."""
        return self.errors[0]


class ConfigFileError(ConfigError):
    """Cluster configuration file could not be read."""
    pass


class InvalidAWSCredentialsError(CortexError):
    """AWS rejected the supplied credentials."""
    
    def __init__(self):
        super().__init__("invalid AWS credentials")


class MissingCredentialsError(CortexError):
    """No AWS credentials were found."""
    pass


class AccountLookupError(CortexError):
    """AWS account lookup failed for a reason other than bad credentials."""
    pass
