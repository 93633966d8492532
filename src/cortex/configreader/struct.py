"""Struct validation of a configuration document against a rule set."""

import logging
from collections.abc import Mapping
from typing import Any, List, Optional

from pydantic import BaseModel

from cortex.configreader.rules import StructValidation, apply_rule
from cortex.errors import FieldError


logger = logging.getLogger(__name__)


def validate_struct(
    target: BaseModel,
    document: Optional[Any],
    struct_validation: StructValidation,
) -> List[FieldError]:
    """Apply every rule of ``struct_validation`` to ``document``.
    
    Resolved values are assigned onto ``target``. Errors are collected for all
    fields instead of stopping at the first one, and come back in rule order.
    A missing document is treated as an empty mapping.
    """
    if document is None:
        document = {}
    if not isinstance(document, Mapping):
        return [FieldError(f"expected a mapping of configuration keys, got {type(document).__name__}")]
        
    errors: List[FieldError] = []
    
    for field in struct_validation.struct_fields:
        present = field.key in document
        try:
            value = apply_rule(field.key, field.validation, document.get(field.key), present=present)
        except FieldError as e:
            errors.append(e)
            continue
            
        if not present and value is not None:
            logger.debug(f"Using default for {field.key}: {value}")
        setattr(target, field.key, value)
        
    known = set(struct_validation.keys) | set(struct_validation.ignored_keys)
    for key in document:
        if key not in known:
            logger.debug(f"Ignoring unrecognized key: {key}")
            
    return errors


def first_error(errors: List[FieldError]) -> Optional[FieldError]:
    """Return the first error in rule order, if any."""
    if errors:
        return errors[0]
    return None
