"""Tests for chat relay request parsing."""

import pytest

from smart_tutor.core.exceptions import ChatRequestError
from smart_tutor.schemas.chat_schema import ChatRelayRequest


class TestFromPayload:
    """Tests for ChatRelayRequest.from_payload."""

    def test_valid_payload(self) -> None:
        request = ChatRelayRequest.from_payload(
            {
                "messages": [
                    {"role": "user", "content": "hi"},
                    {"role": "assistant", "content": "hello"},
                ],
                "courseId": "web-development",
            }
        )
        assert request.course_id == "web-development"
        assert [m.role for m in request.messages] == ["user", "assistant"]

    @pytest.mark.parametrize(
        "payload",
        [None, [], {}, {"messages": "not an array"}, {"messages": {"role": "user"}}],
    )
    def test_missing_or_non_array_messages(self, payload: object) -> None:
        with pytest.raises(ChatRequestError) as exc_info:
            ChatRelayRequest.from_payload(payload)
        assert exc_info.value.message == "Messages array is required"

    def test_bad_message_item(self) -> None:
        with pytest.raises(ChatRequestError) as exc_info:
            ChatRelayRequest.from_payload({"messages": [{"role": "system", "content": "x"}]})
        assert exc_info.value.message == "Invalid message format"
        assert exc_info.value.status_code == 400

    def test_upstream_messages(self) -> None:
        request = ChatRelayRequest.from_payload(
            {"messages": [{"role": "user", "content": "hi"}]}
        )
        assert request.upstream_messages("SYS") == [
            {"role": "system", "content": "SYS"},
            {"role": "user", "content": "hi"},
        ]
