"""Tests for interactive prompt resolution."""

from typing import Optional
from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel

from cortex.configreader.prompt import read_prompt_item, read_prompts
from cortex.configreader.rules import (
    Int64PtrValidation,
    PromptItemValidation,
    PromptValidation,
    StringPtrValidation,
)
from cortex.errors import FieldError


class Sizing(BaseModel):
    """Target model for prompts."""
    kind: Optional[str] = None
    count: Optional[int] = None


def _validation(skip_populated_fields: bool = False) -> PromptValidation:
    return PromptValidation(
        skip_populated_fields=skip_populated_fields,
        items=[
            PromptItemValidation(
                key="kind",
                prompt="Kind",
                validation=StringPtrValidation(required=True, default="large"),
            ),
            PromptItemValidation(
                key="count",
                prompt="Count",
                validation=Int64PtrValidation(required=True, default=2, greater_than=0),
            ),
        ],
    )


class TestReadPrompts:
    """Test read_prompts."""
    
    def test_prompts_in_order_with_defaults(self):
        """Test prompts run in order and show defaults as text."""
        prompter = MagicMock(side_effect=["small", "7"])
        target = Sizing()
        
        read_prompts(target, _validation(), prompter)
        
        assert target.kind == "small"
        assert target.count == 7
        assert [c.args for c in prompter.call_args_list] == [("Kind", "large"), ("Count", "2")]
        
    def test_empty_answer_takes_default(self):
        """Test an empty answer selects the default."""
        target = Sizing()
        read_prompts(target, _validation(), MagicMock(return_value=""))
        
        assert target.kind == "large"
        assert target.count == 2
        
    def test_skip_populated_fields(self):
        """Test populated fields are not asked again."""
        prompter = MagicMock(return_value="3")
        target = Sizing(kind="medium")
        
        read_prompts(target, _validation(skip_populated_fields=True), prompter)
        
        prompter.assert_called_once_with("Count", "2")
        assert target.kind == "medium"
        assert target.count == 3
        
    def test_populated_fields_asked_when_not_skipping(self):
        """Test every field is asked when skipping is off."""
        prompter = MagicMock(side_effect=["xlarge", "4"])
        target = Sizing(kind="medium", count=1)
        
        read_prompts(target, _validation(), prompter)
        
        assert prompter.call_count == 2
        assert target.kind == "xlarge"
        
    def test_rejected_answer_stops(self):
        """Test the first rejected answer raises and later prompts are not run."""
        prompter = MagicMock(side_effect=["large", "0", "5"])
        target = Sizing()
        
        with pytest.raises(FieldError) as exc_info:
            read_prompts(target, _validation(), prompter)
            
        assert exc_info.value.key == "count"
        assert prompter.call_count == 2
        assert target.count is None


def test_read_prompt_item_native_answer():
    """Test prompters may return native values."""
    target = Sizing()
    item = _validation().items[1]
    
    assert read_prompt_item(target, item, lambda label, default: 9) == 9
    assert target.count == 9


class TestReadPromptsAttempts:
    """Test read_prompts with more than one attempt per item."""
    
    def test_rejected_answer_asked_again(self):
        """Test rejected answers are passed to the hook and asked again."""
        prompter = MagicMock(side_effect=["large", "0", "-1", "4"])
        on_rejected = MagicMock()
        target = Sizing()
        
        read_prompts(target, _validation(), prompter, max_attempts=3, on_rejected=on_rejected)
        
        assert target.count == 4
        assert on_rejected.call_count == 2
        assert all(c.args[0].key == "count" for c in on_rejected.call_args_list)
        
    def test_last_rejection_raises(self):
        """Test the final rejected answer raises without calling the hook."""
        prompter = MagicMock(side_effect=["large", "0", "0"])
        on_rejected = MagicMock()
        
        with pytest.raises(FieldError):
            read_prompts(Sizing(), _validation(), prompter, max_attempts=2, on_rejected=on_rejected)
            
        assert on_rejected.call_count == 1
        
    def test_skip_populated_with_attempts(self):
        """Test populated fields are still skipped when retrying."""
        prompter = MagicMock(side_effect=["0", "3"])
        target = Sizing(kind="medium")
        
        read_prompts(target, _validation(skip_populated_fields=True), prompter, max_attempts=2)
        
        assert [c.args[0] for c in prompter.call_args_list] == ["Count", "Count"]
        assert target.count == 3
