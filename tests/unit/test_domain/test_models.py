"""Tests for the domain models."""

from __future__ import annotations

import pytest
from pydantic import TypeAdapter, ValidationError

from termrelay.domain.models import (
    ChannelClosed,
    CompletionResult,
    Cycle,
    KeyInput,
    NoMatch,
    SessionEvent,
    SessionState,
    WireMessage,
)


class TestWireMessage:
    def test_fields_default_to_none(self) -> None:
        msg = WireMessage()
        assert msg.output is None
        assert msg.cwd_update is None

    def test_is_frozen(self) -> None:
        msg = WireMessage(output="x")
        with pytest.raises(ValidationError):
            msg.output = "y"  # type: ignore[misc]

    def test_rejects_non_string_output(self) -> None:
        with pytest.raises(ValidationError):
            WireMessage.model_validate({"output": ["a"]})


class TestSessionState:
    def test_defaults(self) -> None:
        state = SessionState()
        assert state.cwd == "~"
        assert state.input_enabled is False


class TestDiscriminatedUnions:
    def test_completion_result_by_tag(self) -> None:
        adapter = TypeAdapter(CompletionResult)
        result = adapter.validate_python(
            {"result_type": "cycle", "text": "cls", "candidates": ["clear", "cls"], "fresh": False}
        )
        assert isinstance(result, Cycle)
        assert result.candidates == ("clear", "cls")
        assert isinstance(adapter.validate_python({"result_type": "no_match"}), NoMatch)

    def test_session_event_by_tag(self) -> None:
        adapter = TypeAdapter(SessionEvent)
        assert adapter.validate_python({"event_type": "key_input", "data": "a"}) == KeyInput(data="a")
        closed = adapter.validate_python({"event_type": "channel_closed", "code": 1000})
        assert closed == ChannelClosed(code=1000, reason="")
