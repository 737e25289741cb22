class AutomatonError(ValueError):
    """Base class for every recoverable error raised while building or querying an automaton."""

    code = 'automaton_error'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidCardinalityError(AutomatonError):
    code = 'invalid_cardinality'


class EmptySymbolError(AutomatonError):
    code = 'empty_symbol'


class DuplicateSymbolError(AutomatonError):
    code = 'duplicate_symbol'


class EmptyStateNameError(AutomatonError):
    code = 'empty_state_name'


class InvalidStateNameError(AutomatonError):
    code = 'invalid_state_name'


class DuplicateStateError(AutomatonError):
    code = 'duplicate_state'


class InvalidAcceptFlagError(AutomatonError):
    code = 'invalid_accept_flag'


class UnknownStateError(AutomatonError):
    code = 'unknown_state'


class UnknownSymbolError(AutomatonError):
    code = 'unknown_symbol'


class MalformedTransitionError(AutomatonError):
    code = 'malformed_transition'


class IncompleteTransitionsError(AutomatonError):
    """Raised when a DFA would be built with unbound (state, symbol) pairs."""

    code = 'incomplete_transitions'

    def __init__(self, message: str, missing=None):
        super().__init__(message)
        self.missing = list(missing or [])


class InvalidDefinitionError(AutomatonError):
    code = 'invalid_definition'


class NoAutomatonError(AutomatonError):
    code = 'no_automaton'


class PathLimitExceededError(AutomatonError):
    code = 'path_limit_exceeded'
