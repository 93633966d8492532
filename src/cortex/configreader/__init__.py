"""Declarative validation of loosely-typed configuration documents."""

from cortex.configreader.rules import (
    BoolValidation,
    FieldValidation,
    Int64PtrValidation,
    Int64Validation,
    PromptItemValidation,
    PromptValidation,
    StringPtrValidation,
    StringValidation,
    StructValidation,
    apply_rule,
)
from cortex.configreader.struct import first_error, validate_struct
from cortex.configreader.prompt import Prompter, read_prompt_item, read_prompts

__all__ = [
    "BoolValidation",
    "FieldValidation",
    "Int64PtrValidation",
    "Int64Validation",
    "PromptItemValidation",
    "PromptValidation",
    "StringPtrValidation",
    "StringValidation",
    "StructValidation",
    "apply_rule",
    "first_error",
    "validate_struct",
    "Prompter",
    "read_prompt_item",
    "read_prompts",
]
