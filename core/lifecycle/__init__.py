"""Lifecycle Module - match funnel state machine."""
from core.lifecycle.states import MatchStatus, TERMINAL_STATES, SIMPLIFIED_FUNNEL, is_terminal
from core.lifecycle.service import MatchLifecycle, TransitionResult, status_history
from core.lifecycle.notes import append_note

__all__ = [
    'MatchStatus', 'TERMINAL_STATES', 'SIMPLIFIED_FUNNEL', 'is_terminal',
    'MatchLifecycle', 'TransitionResult', 'status_history', 'append_note',
]
