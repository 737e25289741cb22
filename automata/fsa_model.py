from typing import Dict, List, Optional, Tuple, Iterator
from dataclasses import dataclass

from .exceptions import UnknownStateError


PLACEHOLDER_STATE_NAME = 'Empty'


@dataclass(frozen=True)
class State:
    """A named state of an automaton. Transitions live on the automaton, keyed by name."""
    name: str
    is_accept: bool


class FiniteAutomaton:
    """
    Common shape of the deterministic and non-deterministic engines.

    The automaton owns every state in an arena keyed by state name. Transition
    tables only hold state names, so self-loops and cycles need no special
    handling. Instances are never mutated after construction; use the builders
    in fsa_construction to produce a new one instead.
    """

    kind = ''

    def __init__(self, states: List[State], alphabet: Tuple[str, ...], transitions: Dict, start_state: str):
        self._states: Dict[str, State] = {state.name: state for state in states}
        self._alphabet = tuple(alphabet)
        self._transitions = transitions

        if self._states:
            if start_state not in self._states:
                raise UnknownStateError(f"Start state '{start_state}' is not a state of the automaton")
            self._start_state = self._states[start_state]
        else:
            # Lives outside the arena: never accepting, no outgoing transitions
            self._start_state = State(PLACEHOLDER_STATE_NAME, False)

    @property
    def states(self) -> Tuple[State, ...]:
        return tuple(self._states.values())

    @property
    def state_names(self) -> Tuple[str, ...]:
        return tuple(self._states)

    @property
    def alphabet(self) -> Tuple[str, ...]:
        return self._alphabet

    @property
    def start_state(self) -> State:
        return self._start_state

    @property
    def accept_states(self) -> Tuple[State, ...]:
        return tuple(state for state in self._states.values() if state.is_accept)

    def has_state(self, name: str) -> bool:
        return name in self._states

    def get_state(self, name: str) -> State:
        """Look a state up by name. The placeholder start state resolves too."""
        if name in self._states:
            return self._states[name]
        if not self._states and name == self._start_state.name:
            return self._start_state
        raise UnknownStateError(f"State '{name}' does not exist")

    def is_accepting(self, name: str) -> bool:
        return self.get_state(name).is_accept

    def destinations(self, state: str, symbol: str) -> Tuple[str, ...]:
        """All states reachable from ``state`` on ``symbol``; empty when nothing is bound."""
        raise NotImplementedError

    def bound_transitions(self) -> Iterator[Tuple[str, str, Tuple[str, ...]]]:
        """
        Yield (state, symbol, destinations) for every pair that has at least one
        destination, in state declaration order then alphabet order.
        """
        for name in self._states:
            for symbol in self._alphabet:
                targets = self.destinations(name, symbol)
                if targets:
                    yield name, symbol, targets

    def to_dict(self) -> Dict:
        """Convert to the FSA dictionary format used by the views and build_automaton."""
        return {
            'type': self.kind,
            'states': list(self._states),
            'alphabet': list(self._alphabet),
            'transitions': {
                name: {symbol: list(self.destinations(name, symbol))
                       for symbol in self._alphabet if self.destinations(name, symbol)}
                for name in self._states
            },
            'startingState': self._start_state.name,
            'acceptingStates': [state.name for state in self.accept_states],
        }

    def __repr__(self):
        return (f"{self.__class__.__name__}(states={list(self._states)}, alphabet={list(self._alphabet)}, "
                f"start={self._start_state.name!r})")


class DFA(FiniteAutomaton):
    """Deterministic automaton: each (state, symbol) has exactly one destination."""

    kind = 'dfa'

    def __init__(self, states: List[State], alphabet: Tuple[str, ...], transitions: Dict[str, Dict[str, str]],
                 start_state: str):
        table = {name: dict(transitions.get(name, {})) for name in (state.name for state in states)}
        super().__init__(states, alphabet, table, start_state)

    def next_state(self, state: str, symbol: str) -> Optional[str]:
        return self._transitions.get(state, {}).get(symbol)

    def destinations(self, state: str, symbol: str) -> Tuple[str, ...]:
        target = self.next_state(state, symbol)
        return (target,) if target is not None else ()

    def accepts(self, input_string: str) -> bool:
        from .fsa_simulation import simulate_deterministic_fsa
        return simulate_deterministic_fsa(self, input_string).accepted


class NFA(FiniteAutomaton):
    """Non-deterministic automaton: each (state, symbol) has zero or more destinations."""

    kind = 'nfa'

    def __init__(self, states: List[State], alphabet: Tuple[str, ...],
                 transitions: Dict[str, Dict[str, List[str]]], start_state: str):
        table = {
            name: {symbol: tuple(targets) for symbol, targets in transitions.get(name, {}).items() if targets}
            for name in (state.name for state in states)
        }
        super().__init__(states, alphabet, table, start_state)

    def destinations(self, state: str, symbol: str) -> Tuple[str, ...]:
        return self._transitions.get(state, {}).get(symbol, ())

    def accepts(self, input_string: str) -> bool:
        from .fsa_simulation import simulate_nondeterministic_fsa
        return simulate_nondeterministic_fsa(self, input_string).accepted
