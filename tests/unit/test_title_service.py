"""Tests for session title derivation."""

from smart_tutor.services.title_service import derive_session_title


class TestDeriveSessionTitle:
    """Tests for derive_session_title."""

    def test_short_message_used_verbatim(self) -> None:
        assert derive_session_title("What is photosynthesis?") == "What is photosynthesis?"

    def test_exactly_fifty_characters_not_truncated(self) -> None:
        text = "x" * 50
        assert derive_session_title(text) == text

    def test_long_message_truncated_with_ellipsis(self) -> None:
        text = "Can you explain how the quadratic formula is derived step by step?"
        title = derive_session_title(text)
        assert title == text[:50] + "..."
        assert len(title) == 53

    def test_surrounding_whitespace_stripped(self) -> None:
        assert derive_session_title("  hello  \n") == "hello"
