"""
Read-only text renderings of an automaton.

Sets are written in the order their members were declared, e.g. ``{q0, q1}``,
and the whole machine can be shown as the formal 5-tuple
``A = <Q = {...}, Σ = {...}, q0, δ, F = {...}>``.
"""
from typing import Dict, Iterable, List, Sequence, Tuple

from .fsa_model import FiniteAutomaton


def render_set(items: Iterable[str]) -> str:
    return '{' + ', '.join(items) + '}'


def render_states(automaton: FiniteAutomaton) -> str:
    return render_set(automaton.state_names)


def render_alphabet(automaton: FiniteAutomaton) -> str:
    return render_set(automaton.alphabet)


def render_start_state(automaton: FiniteAutomaton) -> str:
    return automaton.start_state.name


def render_accept_states(automaton: FiniteAutomaton) -> str:
    return render_set(state.name for state in automaton.accept_states)


def render_tuple(automaton: FiniteAutomaton) -> str:
    return (f"A = <Q = {render_states(automaton)}, Σ = {render_alphabet(automaton)}, "
            f"{render_start_state(automaton)}, δ, F = {render_accept_states(automaton)}>")


def render_transition_function(automaton: FiniteAutomaton) -> List[str]:
    """One line per bound pair: ``δ(q0, a) = q1`` for a DFA, ``δ(q0, a) = {q0, q1}`` for an NFA."""
    lines = []
    for state, symbol, targets in automaton.bound_transitions():
        if automaton.kind == 'dfa':
            lines.append(f"δ({state}, {symbol}) = {targets[0]}")
        else:
            lines.append(f"δ({state}, {symbol}) = {render_set(targets)}")
    return lines


def render_path(path: Sequence[str]) -> str:
    return ' -> '.join(path)


def render_transition_path(path: Sequence[Tuple[str, str, str]], start_state: str) -> str:
    """Render a DFA walk such as ``q0 -1-> q1 -0-> q0``."""
    parts = [start_state]
    for _, symbol, next_state in path:
        parts.append(f"-{symbol}-> {next_state}")
    return ' '.join(parts)


def render_state(automaton: FiniteAutomaton, name: str) -> str:
    """Multi-line dump of a single state with its outgoing transitions."""
    state = automaton.get_state(name)
    lines = [
        'State {',
        f'    name: "{state.name}",',
        f'    is_accept: {str(state.is_accept).lower()},',
        '    transitions: {',
    ]
    for symbol in automaton.alphabet:
        targets = automaton.destinations(state.name, symbol)
        if not targets:
            continue
        if automaton.kind == 'dfa':
            lines.append(f"        '{symbol}': \"{targets[0]}\",")
        else:
            lines.append(f"        '{symbol}': {render_set(targets)},")
    lines.append('    },')
    lines.append('}')
    return '\n'.join(lines)


def describe_automaton(automaton: FiniteAutomaton) -> Dict:
    """Every rendering at once, as returned by the views and the session."""
    return {
        'type': automaton.kind,
        'states': render_states(automaton),
        'alphabet': render_alphabet(automaton),
        'start_state': render_start_state(automaton),
        'accept_states': render_accept_states(automaton),
        'tuple': render_tuple(automaton),
        'transition_function': render_transition_function(automaton),
    }
