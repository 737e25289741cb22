from typing import Dict, List, Set, Tuple
from collections import deque

from .fsa_model import FiniteAutomaton


def missing_transitions(automaton: FiniteAutomaton) -> List[Tuple[str, str]]:
    """
    Lists every (state, symbol) pair with no destination.

    For a DFA built through DFATransitionBuilder this is always empty; for an
    NFA the missing pairs are the legal empty transitions.
    """
    return [
        (state.name, symbol)
        for state in automaton.states
        for symbol in automaton.alphabet
        if not automaton.destinations(state.name, symbol)
    ]


def is_complete(automaton: FiniteAutomaton) -> bool:
    """
    Checks if the automaton is complete.

    An automaton is complete if for each state and each symbol there is at least
    one transition. No states or an empty alphabet is trivially complete.
    """
    return not missing_transitions(automaton)


def is_deterministic(automaton: FiniteAutomaton) -> bool:
    """
    Checks if the automaton is deterministic.

    An automaton is deterministic if for each state and each symbol there is at
    most one destination.
    """
    for state in automaton.states:
        for symbol in automaton.alphabet:
            if len(automaton.destinations(state.name, symbol)) > 1:
                return False

    return True


def reachable_states(automaton: FiniteAutomaton) -> Set[str]:
    """
    Uses BFS to find all states reachable from the starting state.

    Returns:
        Set of state names, including the start state itself
    """
    start = automaton.start_state.name
    reachable = {start}
    queue = deque([start])

    while queue:
        current_state = queue.popleft()

        for symbol in automaton.alphabet:
            for next_state in automaton.destinations(current_state, symbol):
                if next_state not in reachable:
                    reachable.add(next_state)
                    queue.append(next_state)

    return reachable


def is_connected(automaton: FiniteAutomaton) -> bool:
    """
    Checks if the automaton is connected.

    An automaton is connected if all states are reachable from the starting state.
    """
    if len(automaton.states) <= 1:
        return True

    reachable = reachable_states(automaton)
    return all(state.name in reachable for state in automaton.states)


def check_all_properties(automaton: FiniteAutomaton) -> Dict:
    """
    Check all properties at once.

    Returns:
        Dict: Dictionary containing all property check results:
        {
            'deterministic': bool,
            'complete': bool,
            'connected': bool,
            'missing_transitions': [[state, symbol], ...],
            'unreachable_states': [state, ...]
        }
    """
    reachable = reachable_states(automaton)
    return {
        'deterministic': is_deterministic(automaton),
        'complete': is_complete(automaton),
        'connected': is_connected(automaton),
        'missing_transitions': [list(pair) for pair in missing_transitions(automaton)],
        'unreachable_states': [state.name for state in automaton.states if state.name not in reachable],
    }
