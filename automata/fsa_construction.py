import logging
import re
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .exceptions import (
    DuplicateStateError,
    DuplicateSymbolError,
    EmptyStateNameError,
    EmptySymbolError,
    IncompleteTransitionsError,
    InvalidAcceptFlagError,
    InvalidCardinalityError,
    InvalidDefinitionError,
    InvalidStateNameError,
    MalformedTransitionError,
    UnknownStateError,
    UnknownSymbolError,
)
from .fsa_model import DFA, NFA, FiniteAutomaton, State

logger = logging.getLogger(__name__)

TRUE_ANSWERS = {'y', 'yes', 's', 'si'}
FALSE_ANSWERS = {'n', 'no'}

# Delimiters of a transition statement, so never part of a state name
RESERVED_STATE_CHARACTERS = '(),{}'

# (state, symbol)->{dest1, dest2, ...}
TRANSITION_STATEMENT = re.compile(
    r'^\s*\(\s*(?P<state>[^(),{}]+?)\s*,\s*(?P<symbol>\S)\s*\)\s*->\s*\{(?P<targets>[^{}]*)\}\s*$'
)


def parse_cardinality(text: str) -> int:
    """Parse a requested alphabet or state-set size. Zero is legal."""
    try:
        size = int(str(text).strip())
    except ValueError:
        raise InvalidCardinalityError(f"'{text}' is not a valid number")
    if size < 0:
        raise InvalidCardinalityError(f"Cardinality must not be negative, got {size}")
    return size


def parse_accept_flag(text: str) -> bool:
    """
    Parse an explicit accept/non-accept answer.

    There is no default: anything other than a recognised yes/no answer is an
    error and the caller has to ask again.
    """
    answer = str(text).strip().lower()
    if answer in TRUE_ANSWERS:
        return True
    if answer in FALSE_ANSWERS:
        return False
    raise InvalidAcceptFlagError(f"'{text}' is not a valid answer, expected y/n")


def parse_transition_statement(text: str) -> Tuple[str, str, List[str]]:
    """
    Parse a transition statement of the form ``(state, symbol)->{dest1, dest2}``.

    Returns:
        (state, symbol, destinations). ``{}`` yields an empty destination list.
    """
    match = TRANSITION_STATEMENT.match(text or '')
    if not match:
        raise MalformedTransitionError(
            f"'{text}' is not a transition statement, expected (state, symbol)->{{dest1, dest2, ...}}"
        )

    targets = [target.strip() for target in match.group('targets').split(',')]
    if targets == ['']:
        targets = []
    if any(not target for target in targets):
        raise MalformedTransitionError(f"'{text}' contains an empty destination")

    return match.group('state'), match.group('symbol'), targets


class AlphabetBuilder:
    """Collects exactly ``size`` distinct symbols, rejecting duplicates without counting them."""

    def __init__(self, size: int):
        if size < 0:
            raise InvalidCardinalityError(f"Cardinality must not be negative, got {size}")
        self.size = size
        self._symbols: List[str] = []

    @property
    def count(self) -> int:
        return len(self._symbols)

    @property
    def is_complete(self) -> bool:
        return len(self._symbols) >= self.size

    def add(self, raw: str) -> str:
        if self.is_complete:
            raise InvalidCardinalityError(f"The alphabet already holds {self.size} symbols")

        entry = str(raw).strip()
        if not entry:
            raise EmptySymbolError("Empty entry, please enter a symbol")

        symbol = entry[0]
        if symbol in self._symbols:
            logger.debug("Rejected duplicate symbol %r", symbol)
            raise DuplicateSymbolError(f"Symbol '{symbol}' already exists in the alphabet")

        self._symbols.append(symbol)
        logger.debug("Added symbol %r (%d/%d)", symbol, self.count, self.size)
        return symbol

    def build(self) -> Tuple[str, ...]:
        if not self.is_complete:
            raise InvalidCardinalityError(
                f"The alphabet needs {self.size} symbols but only {self.count} were given"
            )
        return tuple(self._symbols)


class StateSetBuilder:
    """Collects exactly ``size`` uniquely named states, each with an explicit accept flag."""

    def __init__(self, size: int):
        if size < 0:
            raise InvalidCardinalityError(f"Cardinality must not be negative, got {size}")
        self.size = size
        self._states: Dict[str, State] = {}

    @property
    def count(self) -> int:
        return len(self._states)

    @property
    def is_complete(self) -> bool:
        return len(self._states) >= self.size

    def check_name(self, raw: str) -> str:
        """Validate a candidate name before its accept flag is asked for."""
        name = str(raw).strip()
        if not name:
            raise EmptyStateNameError("State names must not be empty")
        if any(char in RESERVED_STATE_CHARACTERS for char in name):
            raise InvalidStateNameError(
                f"State '{name}' must not contain any of {' '.join(RESERVED_STATE_CHARACTERS)}"
            )
        if name in self._states:
            logger.debug("Rejected duplicate state %r", name)
            raise DuplicateStateError(f"State '{name}' has already been defined")
        return name

    def add(self, raw: str, is_accept: bool) -> State:
        if self.is_complete:
            raise InvalidCardinalityError(f"The state set already holds {self.size} states")
        if not isinstance(is_accept, bool):
            raise InvalidAcceptFlagError(f"State '{raw}' needs an explicit accept flag")

        name = self.check_name(raw)
        state = State(name, is_accept)
        self._states[name] = state
        logger.debug("Added state %r (accept=%s, %d/%d)", name, is_accept, self.count, self.size)
        return state

    def build(self) -> List[State]:
        if not self.is_complete:
            raise InvalidCardinalityError(
                f"The state set needs {self.size} states but only {self.count} were given"
            )
        return list(self._states.values())


class _TransitionBuilder:
    """Shared reference checks for both transition builders."""

    def __init__(self, states: Iterable[State], alphabet: Iterable[str]):
        self.states = list(states)
        self.alphabet = tuple(alphabet)
        self._names = {state.name for state in self.states}

    def _check_state(self, name: str) -> str:
        name = str(name).strip()
        if name not in self._names:
            raise UnknownStateError(f"State '{name}' does not exist")
        return name

    def _check_symbol(self, symbol: str) -> str:
        if symbol not in self.alphabet:
            raise UnknownSymbolError(f"Symbol '{symbol}' is not in the alphabet")
        return symbol


class DFATransitionBuilder(_TransitionBuilder):
    """
    Binds one destination per (state, symbol) pair.

    Rebinding a pair overwrites the previous destination. ``build`` refuses to
    produce a DFA until every pair of the states x alphabet cross-product is bound.
    """

    def __init__(self, states: Iterable[State], alphabet: Iterable[str]):
        super().__init__(states, alphabet)
        self._table: Dict[str, Dict[str, str]] = {state.name: {} for state in self.states}

    def bind(self, state: str, symbol: str, destination: str):
        state = self._check_state(state)
        symbol = self._check_symbol(symbol)
        destination = self._check_state(destination)

        previous = self._table[state].get(symbol)
        if previous is not None and previous != destination:
            logger.debug("Rebinding (%s, %s): %s -> %s", state, symbol, previous, destination)
        self._table[state][symbol] = destination

    def unbound_pairs(self) -> List[Tuple[str, str]]:
        return [
            (state.name, symbol)
            for state in self.states
            for symbol in self.alphabet
            if symbol not in self._table[state.name]
        ]

    def build(self, start_state: Optional[str]) -> DFA:
        missing = self.unbound_pairs()
        if missing:
            pairs = ', '.join(f"({state}, {symbol})" for state, symbol in missing)
            raise IncompleteTransitionsError(f"No transition bound for {pairs}", missing)

        if self.states:
            start_state = self._check_state(start_state or '')

        dfa = DFA(self.states, self.alphabet, self._table, start_state)
        logger.info("Built DFA with %d states over %d symbols", len(self.states), len(self.alphabet))
        return dfa


class NFATransitionBuilder(_TransitionBuilder):
    """
    Accumulates transition statements. Statements for the same pair are merged
    (ordered union); pairs never mentioned have no destinations.
    """

    def __init__(self, states: Iterable[State], alphabet: Iterable[str]):
        super().__init__(states, alphabet)
        self._table: Dict[str, Dict[str, List[str]]] = {state.name: {} for state in self.states}

    def add(self, state: str, symbol: str, destinations: Iterable[str]) -> Tuple[str, str, List[str]]:
        # Validate everything before touching the table so a bad statement changes nothing
        state = self._check_state(state)
        symbol = self._check_symbol(symbol)
        targets = [self._check_state(target) for target in destinations]

        bucket = self._table[state].setdefault(symbol, [])
        for target in targets:
            if target not in bucket:
                bucket.append(target)
        logger.debug("Transition (%s, %s) -> %s", state, symbol, bucket)
        return state, symbol, list(bucket)

    def add_statement(self, text: str) -> Tuple[str, str, List[str]]:
        state, symbol, targets = parse_transition_statement(text)
        return self.add(state, symbol, targets)

    def build(self, start_state: Optional[str]) -> NFA:
        if self.states:
            start_state = self._check_state(start_state or '')

        nfa = NFA(self.states, self.alphabet, self._table, start_state)
        logger.info("Built NFA with %d states over %d symbols", len(self.states), len(self.alphabet))
        return nfa


def _require(definition: Dict, key: str, expected_type):
    if key not in definition:
        raise InvalidDefinitionError(f"Missing '{key}' in automaton definition")
    value = definition[key]
    if not isinstance(value, expected_type):
        raise InvalidDefinitionError(f"'{key}' has the wrong type")
    return value


def _as_targets(value: Union[str, List[str]]) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return list(value)
    raise InvalidDefinitionError(f"Transition destinations must be a state name or a list, got {value!r}")


def build_automaton(definition: Dict) -> FiniteAutomaton:
    """
    Build a DFA or NFA from the FSA dictionary format.

    Args:
        definition: A dictionary with the following keys:
            - type: 'dfa' (default) or 'nfa'
            - states: List of state names
            - alphabet: List of symbols
            - acceptingStates: List of accepting state names
            - startingState: The starting state (may be omitted when there are no states)
            - transitions: {state: {symbol: dest or [dests]}}
            - statements: NFA only, list of '(state, symbol)->{...}' strings

    Every entry goes through the same builders as the interactive command, so
    duplicates, unknown references and malformed statements raise the same errors.
    """
    if not isinstance(definition, dict):
        raise InvalidDefinitionError("The automaton definition must be an object")

    kind = str(definition.get('type', 'dfa')).lower()
    if kind not in ('dfa', 'nfa'):
        raise InvalidDefinitionError(f"Unknown automaton type '{kind}'")

    alphabet_entries = _require(definition, 'alphabet', list)
    state_entries = _require(definition, 'states', list)
    accepting = definition.get('acceptingStates', [])
    transitions = definition.get('transitions', {})
    if not isinstance(accepting, list):
        raise InvalidDefinitionError("'acceptingStates' has the wrong type")
    if not isinstance(transitions, dict):
        raise InvalidDefinitionError("'transitions' has the wrong type")

    alphabet_builder = AlphabetBuilder(len(alphabet_entries))
    for symbol in alphabet_entries:
        if not isinstance(symbol, str) or len(symbol.strip()) > 1:
            raise InvalidDefinitionError(f"Alphabet symbols must be single characters, got {symbol!r}")
        alphabet_builder.add(symbol)
    alphabet = alphabet_builder.build()

    state_builder = StateSetBuilder(len(state_entries))
    for name in state_entries:
        state_builder.add(str(name), str(name).strip() in accepting)
    states = state_builder.build()

    unknown_accepting = [name for name in accepting if name not in {state.name for state in states}]
    if unknown_accepting:
        raise UnknownStateError(f"Accepting state '{unknown_accepting[0]}' does not exist")

    if kind == 'dfa':
        builder = DFATransitionBuilder(states, alphabet)
    else:
        builder = NFATransitionBuilder(states, alphabet)

    for state, row in transitions.items():
        if not isinstance(row, dict):
            raise InvalidDefinitionError(f"Transitions for state '{state}' must be an object")
        for symbol, value in row.items():
            targets = _as_targets(value)
            if kind == 'dfa':
                if len(targets) > 1:
                    raise InvalidDefinitionError(
                        f"A DFA allows one destination for ({state}, {symbol}), got {len(targets)}"
                    )
                if targets:
                    builder.bind(state, symbol, targets[0])
            else:
                builder.add(state, symbol, targets)

    statements = definition.get('statements', [])
    if statements and kind != 'nfa':
        raise InvalidDefinitionError("Transition statements are only accepted for NFAs")
    for statement in statements:
        builder.add_statement(statement)

    return builder.build(definition.get('startingState'))
