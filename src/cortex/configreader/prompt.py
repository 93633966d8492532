"""Interactive resolution of fields the operator must confirm."""

import logging
from typing import Any, Callable, Optional, Protocol

from pydantic import BaseModel

from cortex.configreader.rules import PromptItemValidation, PromptValidation, apply_rule
from cortex.errors import FieldError


logger = logging.getLogger(__name__)


class Prompter(Protocol):
    """Asks the operator for one value and returns the raw answer."""
    
    def __call__(self, label: str, default: Optional[str]) -> Any:
        ...


def _default_text(item: PromptItemValidation) -> Optional[str]:
    default = item.validation.default
    if default is None:
        return None
    if isinstance(default, bool):
        return "true" if default else "false"
    return str(default)


def read_prompt_item(target: BaseModel, item: PromptItemValidation, prompter: Prompter) -> Any:
    """Prompt for a single field and assign the accepted value.
    
    An empty answer selects the rule default. A rejected answer raises the
    FieldError from the rule check; the caller decides whether to ask again.
    """
    answer = prompter(item.prompt, _default_text(item))
    if isinstance(answer, str):
        answer = answer.strip()
    present = answer is not None and answer != ""
    
    value = apply_rule(item.key, item.validation, answer, present=present, from_prompt=True)
    setattr(target, item.key, value)
    logger.debug(f"Prompted {item.key}: {value}")
    return value


def read_prompts(
    target: BaseModel,
    prompt_validation: PromptValidation,
    prompter: Prompter,
    max_attempts: int = 1,
    on_rejected: Optional[Callable[[FieldError], None]] = None,
):
    """Prompt for every item in order.
    
    Each item is asked up to ``max_attempts`` times; ``on_rejected`` is called
    with every rejected answer that will be asked again. The last rejected
    answer raises, so later items are not prompted.
    """
    for item in prompt_validation.items:
        if prompt_validation.skip_populated_fields and getattr(target, item.key) is not None:
            continue
            
        for attempt in range(1, max_attempts + 1):
            try:
                read_prompt_item(target, item, prompter)
                break
            except FieldError as e:
                if attempt >= max_attempts:
                    raise
                if on_rejected is not None:
                    on_rejected(e)
