import logging
from typing import Iterator, List, NamedTuple, Optional, Tuple, Union

from .conf import get_setting
from .exceptions import PathLimitExceededError
from .fsa_model import DFA, NFA, FiniteAutomaton

logger = logging.getLogger(__name__)


class DFASimulationResult(NamedTuple):
    """Outcome of a deterministic run"""
    accepted: bool
    path: List[Tuple[str, str, str]]
    final_state: str
    rejection_reason: Optional[str] = None
    rejection_position: Optional[int] = None


class NFAStep(NamedTuple):
    """Paths still alive after consuming the symbol at ``position``"""
    position: int
    symbol: str
    live_paths: List[List[str]]
    dropped: int


class NFASimulationResult(NamedTuple):
    """Outcome of a non-deterministic run with every accepting path kept for tracing"""
    accepted: bool
    accepting_paths: List[List[str]]
    surviving_paths: List[List[str]]
    paths_explored: int
    steps: List[NFAStep]
    rejection_reason: Optional[str] = None
    rejection_position: Optional[int] = None


def simulate_deterministic_fsa(dfa: FiniteAutomaton, input_string: str) -> DFASimulationResult:
    """
    Simulates a deterministic FSA with the given input string.

    The walk starts at the start state and follows the unique transition for
    each symbol. A symbol with no transition from the current state, whether it
    is unbound or outside the alphabet, stops the run and rejects the word.

    Args:
        dfa: The automaton to run. It is only read, never modified.
        input_string: The input string to simulate

    Returns:
        DFASimulationResult with the transitions taken as
        [(current_state, symbol, next_state), ...] and, for rejected words,
        the reason and the input position where the run stopped.
    """
    current_state = dfa.start_state.name
    execution_path = []

    for position, symbol in enumerate(input_string):
        next_states = dfa.destinations(current_state, symbol)

        if not next_states:
            logger.debug("No transition for %r from %s at position %d", symbol, current_state, position)
            return DFASimulationResult(
                accepted=False,
                path=execution_path,
                final_state=current_state,
                rejection_reason=f"No transition defined for symbol '{symbol}' from state '{current_state}'",
                rejection_position=position,
            )

        # Only reachable when an NFA is handed to the deterministic engine
        if len(next_states) != 1:
            return DFASimulationResult(
                accepted=False,
                path=execution_path,
                final_state=current_state,
                rejection_reason=(f"Non-deterministic transition: multiple states for symbol '{symbol}' "
                                  f"from state '{current_state}'"),
                rejection_position=position,
            )

        next_state = next_states[0]
        execution_path.append((current_state, symbol, next_state))
        current_state = next_state

    if dfa.is_accepting(current_state):
        logger.debug("Accepted %r in %s", input_string, current_state)
        return DFASimulationResult(accepted=True, path=execution_path, final_state=current_state)

    logger.debug("Rejected %r, final state %s is not accepting", input_string, current_state)
    return DFASimulationResult(
        accepted=False,
        path=execution_path,
        final_state=current_state,
        rejection_reason=f"Final state '{current_state}' is not an accepting state",
        rejection_position=len(input_string),
    )


def _deduplicate_paths(paths: List[List[str]]) -> List[List[str]]:
    """Keep the first path reaching each state."""
    seen = set()
    unique = []
    for path in paths:
        if path[-1] not in seen:
            seen.add(path[-1])
            unique.append(path)
    return unique


def iter_nondeterministic_steps(nfa: FiniteAutomaton, input_string: str, deduplicate: Optional[bool] = None,
                                max_paths: Optional[int] = None) -> Iterator[NFAStep]:
    """
    Expand every live path one symbol at a time.

    Each path is the ordered list of states visited so far, starting as
    [start_state]. For every symbol each live path is extended once per
    destination; paths without a destination are dropped. One NFAStep is
    yielded per consumed symbol. When a step leaves no live path it is still
    yielded and the generator stops without reading the remaining symbols.

    Args:
        nfa: The automaton to run
        input_string: The input string to simulate
        deduplicate: Keep a single path per reached state (AUTOMATA['NFA_DEDUPLICATE_PATHS'] when None)
        max_paths: Upper bound on live paths (AUTOMATA['NFA_MAX_PATHS'] when None, 0 disables it)

    Raises:
        PathLimitExceededError: If more than ``max_paths`` paths are alive after a symbol
    """
    if deduplicate is None:
        deduplicate = get_setting('NFA_DEDUPLICATE_PATHS')
    if max_paths is None:
        max_paths = get_setting('NFA_MAX_PATHS')

    live_paths = [[nfa.start_state.name]]

    for position, symbol in enumerate(input_string):
        next_paths = []
        dropped = 0

        for path in live_paths:
            destinations = nfa.destinations(path[-1], symbol)
            if not destinations:
                dropped += 1
                continue
            for destination in destinations:
                next_paths.append(path + [destination])

        if deduplicate:
            next_paths = _deduplicate_paths(next_paths)

        if dropped:
            logger.debug("Symbol %r at position %d dropped %d of %d paths",
                         symbol, position, dropped, len(live_paths))

        if max_paths and len(next_paths) > max_paths:
            raise PathLimitExceededError(
                f"{len(next_paths)} live paths after position {position} exceed the limit of {max_paths}"
            )

        yield NFAStep(position=position, symbol=symbol, live_paths=next_paths, dropped=dropped)

        if not next_paths:
            return
        live_paths = next_paths


def simulate_nondeterministic_fsa(nfa: FiniteAutomaton, input_string: str, deduplicate: Optional[bool] = None,
                                  max_paths: Optional[int] = None) -> NFASimulationResult:
    """
    Simulates a non-deterministic FSA with the given input string, keeping every path.

    The word is accepted if at least one path that consumed the whole input
    ends in an accepting state. If every path dies on some symbol the run
    rejects immediately at that position.

    Returns:
        NFASimulationResult whose accepting_paths lists each accepting state
        sequence, e.g. [['q0', 'q1', 'q2']].
    """
    live_paths = [[nfa.start_state.name]]
    paths_explored = 1
    steps = []

    for step in iter_nondeterministic_steps(nfa, input_string, deduplicate=deduplicate, max_paths=max_paths):
        steps.append(step)
        paths_explored += len(step.live_paths)

        if not step.live_paths:
            logger.debug("Rejected %r, no live paths at position %d", input_string, step.position)
            return NFASimulationResult(
                accepted=False,
                accepting_paths=[],
                surviving_paths=[],
                paths_explored=paths_explored,
                steps=steps,
                rejection_reason=f"No live paths for symbol '{step.symbol}' at position {step.position}",
                rejection_position=step.position,
            )
        live_paths = step.live_paths

    accepting_paths = [path for path in live_paths if nfa.is_accepting(path[-1])]

    if accepting_paths:
        logger.debug("Accepted %r with %d accepting paths", input_string, len(accepting_paths))
        return NFASimulationResult(
            accepted=True,
            accepting_paths=accepting_paths,
            surviving_paths=live_paths,
            paths_explored=paths_explored,
            steps=steps,
        )

    logger.debug("Rejected %r, none of %d surviving paths accepts", input_string, len(live_paths))
    return NFASimulationResult(
        accepted=False,
        accepting_paths=[],
        surviving_paths=live_paths,
        paths_explored=paths_explored,
        steps=steps,
        rejection_reason='No accepting paths found',
        rejection_position=len(input_string),
    )


def simulate_fsa(automaton: FiniteAutomaton, input_string: str) -> Union[DFASimulationResult, NFASimulationResult]:
    """Run the engine matching the automaton's kind."""
    if isinstance(automaton, NFA):
        return simulate_nondeterministic_fsa(automaton, input_string)
    if isinstance(automaton, DFA):
        return simulate_deterministic_fsa(automaton, input_string)
    raise TypeError(f"Cannot simulate {type(automaton).__name__}")
