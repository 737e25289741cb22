import logging
from typing import Dict, Optional, Union

from .exceptions import NoAutomatonError
from .fsa_construction import build_automaton
from .fsa_model import FiniteAutomaton
from .fsa_rendering import describe_automaton
from .fsa_simulation import DFASimulationResult, NFASimulationResult, simulate_fsa

logger = logging.getLogger(__name__)


class AutomatonSession:
    """
    Holds the one active automaton of an interactive session.

    The automaton is never edited in place: ``rebuild`` swaps in a freshly
    constructed instance, and simulations only read it.
    """

    def __init__(self, automaton: Optional[FiniteAutomaton] = None):
        self._automaton = automaton

    @classmethod
    def from_definition(cls, definition: Optional[Dict]) -> 'AutomatonSession':
        if not definition:
            return cls()
        return cls(build_automaton(definition))

    @property
    def has_automaton(self) -> bool:
        return self._automaton is not None

    @property
    def automaton(self) -> FiniteAutomaton:
        if self._automaton is None:
            raise NoAutomatonError("No automaton has been built yet")
        return self._automaton

    def rebuild(self, automaton: FiniteAutomaton) -> FiniteAutomaton:
        replaced = self._automaton is not None
        self._automaton = automaton
        logger.info("%s %s", "Replaced automaton with" if replaced else "Created", repr(automaton))
        return automaton

    def rebuild_from_definition(self, definition: Dict) -> FiniteAutomaton:
        return self.rebuild(build_automaton(definition))

    def test_word(self, input_string: str) -> Union[DFASimulationResult, NFASimulationResult]:
        return simulate_fsa(self.automaton, input_string)

    def describe(self) -> Dict:
        return describe_automaton(self.automaton)
