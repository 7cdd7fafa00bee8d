from __future__ import annotations
"""Simple finite state machine utility for enforcing allowed status transitions.

Usage:
    from laundry.utils.fsm import TransitionValidator
    FSM = TransitionValidator(
        {'pending': {'approved', 'cancelled'}, 'approved': set(), 'cancelled': set()},
        chain=['pending', 'approved'],
    )
    FSM.assert_can_transition(current_status, target_status)
    FSM.successor('pending')  # -> 'approved'

``chain`` lists the linear forward sequence used by "advance to next" moves; it must
only contain edges present in the graph. Raises InvalidTransitionError if invalid.
"""
from typing import Dict, Iterable, Optional, Set
from laundry.errors import InvalidTransitionError


class TransitionValidator:
    def __init__(self, graph: Dict[str, Set[str]], chain: Optional[Iterable[str]] = None, field_name: str = 'status'):
        self.graph = graph
        self.field_name = field_name
        self.chain = list(chain or [])
        for current, target in zip(self.chain, self.chain[1:]):
            if target not in self.graph.get(current, set()):
                raise ValueError(f'chain step {current} -> {target} is not an edge of the graph')

    def can_transition(self, current: str, target: str) -> bool:
        return target in self.graph.get(current, set())

    def assert_can_transition(self, current: str, target: str):
        if not self.can_transition(current, target):
            raise InvalidTransitionError(
                f"Invalid {self.field_name} transition {current} -> {target}",
                current=current, target=target,
            )
        return True

    def is_terminal(self, state: str) -> bool:
        return not self.graph.get(state)

    def successor(self, current: str) -> Optional[str]:
        """Next state in the forward chain, or None when current is not in it or is its last step."""
        try:
            idx = self.chain.index(current)
        except ValueError:
            return None
        if idx + 1 >= len(self.chain):
            return None
        return self.chain[idx + 1]


__all__ = ['TransitionValidator']
