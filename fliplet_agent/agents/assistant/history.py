"""
Conversation window helpers
"""

from typing import Any, Dict, List, Sequence


def trim_history(messages: Sequence[Dict[str, Any]], max_messages: int = 40) -> List[Dict[str, Any]]:
    """
    Keep the most recent ``max_messages`` messages (oldest dropped wholesale).

    Returns a new list; ``messages`` is not modified.
    """
    if len(messages) <= max_messages:
        return list(messages)
    return list(messages[-max_messages:])
