"""
Data infrastructure for screening conversations.
"""

from .conversations import (
    TurnRole, ConversationTurn, turns_from_wire, turns_to_wire, render_transcript
)

__all__ = [
    'TurnRole',
    'ConversationTurn',
    'turns_from_wire',
    'turns_to_wire',
    'render_transcript',
]
