import pytest
from laundry.errors import InvalidTransitionError
from laundry.models.order import Order
from laundry.services.lifecycle import ORDER_FSM
from laundry.utils.fsm import TransitionValidator


def test_transition_validator_allows_valid():
    fsm = TransitionValidator({'A': {'B'}, 'B': set()})
    assert fsm.assert_can_transition('A', 'B') is True


def test_transition_validator_blocks_invalid():
    fsm = TransitionValidator({'A': {'B'}, 'B': set()})
    with pytest.raises(InvalidTransitionError) as exc:
        fsm.assert_can_transition('A', 'C')
    assert 'A -> C' in exc.value.message


def test_chain_must_follow_graph_edges():
    with pytest.raises(ValueError):
        TransitionValidator({'A': {'B'}, 'B': set(), 'C': set()}, chain=['A', 'C'])


def test_successor_walks_chain_and_stops_at_end():
    fsm = TransitionValidator({'A': {'B'}, 'B': {'C'}, 'C': set()}, chain=['A', 'B', 'C'])
    assert fsm.successor('A') == 'B'
    assert fsm.successor('B') == 'C'
    assert fsm.successor('C') is None
    assert fsm.successor('Z') is None


def test_order_graph_terminal_states():
    assert ORDER_FSM.is_terminal(Order.STATUS_DELIVERED)
    assert ORDER_FSM.is_terminal(Order.STATUS_CANCELLED)
    for status in Order.ALL_STATUSES:
        if status not in Order.TERMINAL_STATUSES:
            assert not ORDER_FSM.is_terminal(status)


def test_order_graph_has_no_backward_edges():
    rank = {s: i for i, s in enumerate(Order.ALL_STATUSES)}
    for current, targets in ORDER_FSM.graph.items():
        for target in targets:
            assert rank[target] > rank[current], f'{current} -> {target} goes backwards'


def test_advance_chain_excludes_admin_gate():
    assert ORDER_FSM.successor(Order.STATUS_PENDING) is None
    assert ORDER_FSM.successor(Order.STATUS_APPROVED) is None
    assert ORDER_FSM.successor(Order.STATUS_ASSIGNED) == Order.STATUS_PICKED
    assert ORDER_FSM.successor(Order.STATUS_OUT_FOR_DELIVERY) == Order.STATUS_DELIVERED
