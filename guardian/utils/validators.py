"""
Input validation utilities
"""
from typing import Iterable, List, Optional

MAX_MESSAGE_LENGTH = 10000
MAX_ACTION_LENGTH = 500


def sanitize_input(text: str, max_length: int = MAX_MESSAGE_LENGTH) -> str:
    """
    Sanitize free text before it is sent to the remote ticket system

    Args:
        text: Input text to sanitize
        max_length: Maximum allowed length

    Returns:
        Sanitized text
    """
    # Remove null bytes
    text = text.replace('\x00', '')

    # Truncate to max length
    if len(text) > max_length:
        text = text[:max_length]

    return text.strip()


def clean_actions(actions: Optional[Iterable[str]]) -> List[str]:
    """Sanitize an operator-supplied action list, dropping blank items"""
    cleaned = (sanitize_input(item, MAX_ACTION_LENGTH) for item in actions or [])
    return [item for item in cleaned if item]
