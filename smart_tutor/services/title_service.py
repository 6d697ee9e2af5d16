"""Chat session title derivation."""

TITLE_MAX_LENGTH = 50
ELLIPSIS = "..."


def derive_session_title(first_message: str, max_length: int = TITLE_MAX_LENGTH) -> str:
    """Title a session after its first user message.

    Messages longer than ``max_length`` characters are cut to that length
    and suffixed with an ellipsis.
    """
    text = first_message.strip()
    if len(text) > max_length:
        return text[:max_length] + ELLIPSIS
    return text
