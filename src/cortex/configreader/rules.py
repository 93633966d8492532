"""Field rule model.

Each configuration field is described by one validation descriptor. The
descriptors are tagged by ``kind`` so a rule table can be written out as plain
data and the resolver can dispatch on it without inspecting the target model.
"""

from typing import Annotated, Any, Callable, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from cortex.errors import FieldError, MissingRequiredFieldError


StringValidator = Callable[[str], str]

_TRUE_STRINGS = ("true", "t", "yes", "y", "1")
_FALSE_STRINGS = ("false", "f", "no", "n", "0")


class _Validation(BaseModel):
    """Options shared by every rule kind."""
    model_config = ConfigDict(frozen=True, extra="forbid")
    
    required: bool = False
    
    @property
    def optional(self) -> bool:
        """Whether an unresolved field stays unset instead of taking a zero value."""
        return False
    
    @property
    def zero(self) -> Any:
        """Value of a field that is absent, has no default, and is not required."""
        return None


class _StringOptions(_Validation):
    allow_empty: bool = False
    custom_validator: Optional[StringValidator] = None


class _IntOptions(_Validation):
    greater_than: Optional[int] = None
    greater_than_or_equal_to: Optional[int] = None
    less_than: Optional[int] = None
    less_than_or_equal_to: Optional[int] = None


class StringValidation(_StringOptions):
    """Rule for a ``str`` field."""
    kind: Literal["string"] = "string"
    default: Optional[str] = None
    
    @property
    def zero(self) -> Any:
        return ""


class StringPtrValidation(_StringOptions):
    """Rule for an ``Optional[str]`` field."""
    kind: Literal["string_ptr"] = "string_ptr"
    default: Optional[str] = None
    
    @property
    def optional(self) -> bool:
        return True


class Int64Validation(_IntOptions):
    """Rule for an ``int`` field."""
    kind: Literal["int"] = "int"
    default: Optional[int] = None
    
    @property
    def zero(self) -> Any:
        return 0


class Int64PtrValidation(_IntOptions):
    """Rule for an ``Optional[int]`` field."""
    kind: Literal["int_ptr"] = "int_ptr"
    default: Optional[int] = None
    
    @property
    def optional(self) -> bool:
        return True


class BoolValidation(_Validation):
    """Rule for a ``bool`` field."""
    kind: Literal["bool"] = "bool"
    default: Optional[bool] = None
    
    @property
    def zero(self) -> Any:
        return False


Validation = Annotated[
    Union[
        StringValidation,
        StringPtrValidation,
        Int64Validation,
        Int64PtrValidation,
        BoolValidation,
    ],
    Field(discriminator="kind"),
]


class FieldValidation(BaseModel):
    """Binds a rule to a document key (the key is also the attribute name)."""
    model_config = ConfigDict(frozen=True)
    
    key: str
    validation: Validation


class StructValidation(BaseModel):
    """Ordered rule set for a whole configuration document."""
    model_config = ConfigDict(frozen=True)
    
    struct_fields: List[FieldValidation]
    ignored_keys: List[str] = Field(default_factory=list)
    
    @property
    def keys(self) -> List[str]:
        """Keys of all declared fields, in declaration order."""
        return [field.key for field in self.struct_fields]


class PromptItemValidation(BaseModel):
    """A field asked interactively, with its label and rule."""
    model_config = ConfigDict(frozen=True)
    
    key: str
    prompt: str
    validation: Validation


class PromptValidation(BaseModel):
    """Ordered set of interactive prompts."""
    model_config = ConfigDict(frozen=True)
    
    skip_populated_fields: bool = False
    items: List[PromptItemValidation] = Field(default_factory=list)


def _parse_string(value: Any) -> str:
    if not isinstance(value, str):
        raise FieldError(f"{value!r} must be a string")
    return value


def _parse_int(value: Any, from_prompt: bool) -> int:
    if isinstance(value, bool):
        raise FieldError(f"{value!r} must be an integer")
    if isinstance(value, int):
        return value
    if from_prompt and isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise FieldError(f"{value!r} must be an integer")


def _parse_bool(value: Any, from_prompt: bool) -> bool:
    if isinstance(value, bool):
        return value
    if from_prompt and isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise FieldError(f"{value!r} must be a boolean")


def _check_string(validation: _StringOptions, value: str) -> str:
    if value == "" and not validation.allow_empty:
        raise FieldError("must not be empty")
    if validation.custom_validator is not None:
        try:
            value = validation.custom_validator(value)
        except ValueError as e:
            raise FieldError(str(e)) from e
    return value


def _check_int(validation: _IntOptions, value: int) -> int:
    if validation.greater_than is not None and value <= validation.greater_than:
        raise FieldError(f"{value} must be greater than {validation.greater_than}")
    if validation.greater_than_or_equal_to is not None and value < validation.greater_than_or_equal_to:
        raise FieldError(
            f"{value} must be greater than or equal to {validation.greater_than_or_equal_to}"
        )
    if validation.less_than is not None and value >= validation.less_than:
        raise FieldError(f"{value} must be less than {validation.less_than}")
    if validation.less_than_or_equal_to is not None and value > validation.less_than_or_equal_to:
        raise FieldError(
            f"{value} must be less than or equal to {validation.less_than_or_equal_to}"
        )
    return value


def _resolve(key: str, validation: _Validation, value: Any, present: bool, from_prompt: bool) -> Any:
    if not present or value is None:
        if validation.default is not None:
            return validation.default
        if validation.required:
            raise MissingRequiredFieldError(key)
        if validation.optional:
            return None
        return validation.zero
        
    if isinstance(validation, (StringValidation, StringPtrValidation)):
        return _check_string(validation, _parse_string(value))
    if isinstance(validation, (Int64Validation, Int64PtrValidation)):
        return _check_int(validation, _parse_int(value, from_prompt))
    if isinstance(validation, BoolValidation):
        return _parse_bool(value, from_prompt)
    raise TypeError(f"Unsupported validation kind: {type(validation).__name__}")


def apply_rule(
    key: str,
    validation: _Validation,
    value: Any = None,
    present: bool = True,
    from_prompt: bool = False,
) -> Any:
    """Resolve one field value against its rule.
    
    Returns the parsed value, the rule default, or the unset/zero value.
    Raises exactly one FieldError scoped to ``key`` otherwise. Strings are
    parsed into integers and booleans only when ``from_prompt`` is set, since
    interactive answers always arrive as text.
    """
    try:
        return _resolve(key, validation, value, present, from_prompt)
    except FieldError as e:
        raise e.with_key(key)
