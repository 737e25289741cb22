import unittest

from automata.exceptions import (
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
from automata.fsa_construction import (
    AlphabetBuilder,
    DFATransitionBuilder,
    NFATransitionBuilder,
    StateSetBuilder,
    build_automaton,
    parse_accept_flag,
    parse_cardinality,
    parse_transition_statement,
)
from automata.fsa_model import DFA, NFA, State


class TestParsing(unittest.TestCase):
    def test_parse_cardinality(self):
        self.assertEqual(parse_cardinality('3'), 3)
        self.assertEqual(parse_cardinality(' 0 \n'), 0)

        for text in ['abc', '', '2.5', '-1']:
            with self.assertRaises(InvalidCardinalityError):
                parse_cardinality(text)

    def test_parse_accept_flag(self):
        self.assertTrue(parse_accept_flag('y'))
        self.assertTrue(parse_accept_flag(' S '))
        self.assertTrue(parse_accept_flag('Yes'))
        self.assertFalse(parse_accept_flag('n'))
        self.assertFalse(parse_accept_flag('NO'))

        # No default is ever picked
        for text in ['', 'maybe', 'true', '1']:
            with self.assertRaises(InvalidAcceptFlagError):
                parse_accept_flag(text)

    def test_parse_transition_statement(self):
        self.assertEqual(parse_transition_statement('(q0, a)->{q0, q1}'), ('q0', 'a', ['q0', 'q1']))
        self.assertEqual(parse_transition_statement('( q1 ,b ) -> { q2 }'), ('q1', 'b', ['q2']))
        self.assertEqual(parse_transition_statement('(q0,a)->{}'), ('q0', 'a', []))

        # Delimiters are legal symbols
        self.assertEqual(parse_transition_statement('(q0, ,)->{q0}'), ('q0', ',', ['q0']))
        self.assertEqual(parse_transition_statement('(q0,{) -> {q1}'), ('q0', '{', ['q1']))

    def test_parse_malformed_transition_statement(self):
        for text in ['q0, a -> q1', '(q0 a)->{q1}', '(q0, ab)->{q1}', '(q0, a)->{q1,}', '(q0, a)->q1', '']:
            with self.assertRaises(MalformedTransitionError):
                parse_transition_statement(text)


class TestAlphabetBuilder(unittest.TestCase):
    def test_duplicates_do_not_count(self):
        builder = AlphabetBuilder(2)
        builder.add('0')

        with self.assertRaises(DuplicateSymbolError):
            builder.add('0')
        self.assertEqual(builder.count, 1)

        with self.assertRaises(EmptySymbolError):
            builder.add('   ')
        self.assertEqual(builder.count, 1)

        builder.add('1')
        self.assertTrue(builder.is_complete)
        self.assertEqual(builder.build(), ('0', '1'))

    def test_first_character_is_the_symbol(self):
        builder = AlphabetBuilder(1)
        self.assertEqual(builder.add(' ab '), 'a')

    def test_empty_alphabet(self):
        builder = AlphabetBuilder(0)
        self.assertTrue(builder.is_complete)
        self.assertEqual(builder.build(), ())

    def test_overflow_and_underflow(self):
        builder = AlphabetBuilder(1)
        with self.assertRaises(InvalidCardinalityError):
            builder.build()

        builder.add('a')
        with self.assertRaises(InvalidCardinalityError):
            builder.add('b')


class TestStateSetBuilder(unittest.TestCase):
    def test_duplicate_and_empty_names(self):
        builder = StateSetBuilder(2)
        builder.add('q0', False)

        with self.assertRaises(DuplicateStateError):
            builder.add('q0', True)
        with self.assertRaises(EmptyStateNameError):
            builder.add('  ', True)
        self.assertEqual(builder.count, 1)

        builder.add(' q1 ', True)
        self.assertEqual(builder.build(), [State('q0', False), State('q1', True)])

    def test_accept_flag_is_required(self):
        builder = StateSetBuilder(1)
        with self.assertRaises(InvalidAcceptFlagError):
            builder.add('q0', None)
        self.assertEqual(builder.count, 0)

    def test_statement_delimiters_in_names(self):
        builder = StateSetBuilder(1)
        for name in ['q(0)', 'a,b', '{q0}']:
            with self.assertRaises(InvalidStateNameError):
                builder.check_name(name)
        self.assertEqual(builder.count, 0)

    def test_empty_state_set(self):
        self.assertEqual(StateSetBuilder(0).build(), [])


class TestDFATransitionBuilder(unittest.TestCase):
    def setUp(self):
        self.states = [State('q0', False), State('q1', True)]
        self.builder = DFATransitionBuilder(self.states, ('0', '1'))

    def bind_all(self):
        self.builder.bind('q0', '0', 'q0')
        self.builder.bind('q0', '1', 'q1')
        self.builder.bind('q1', '0', 'q0')
        self.builder.bind('q1', '1', 'q1')

    def test_unknown_references(self):
        with self.assertRaises(UnknownStateError):
            self.builder.bind('q9', '0', 'q0')
        with self.assertRaises(UnknownStateError):
            self.builder.bind('q0', '0', 'q9')
        with self.assertRaises(UnknownSymbolError):
            self.builder.bind('q0', '2', 'q0')

        self.assertEqual(len(self.builder.unbound_pairs()), 4)

    def test_rebinding_overwrites(self):
        self.bind_all()
        self.builder.bind('q0', '0', 'q1')

        dfa = self.builder.build('q0')
        self.assertEqual(dfa.next_state('q0', '0'), 'q1')

    def test_totality_is_enforced(self):
        self.builder.bind('q0', '0', 'q0')
        self.builder.bind('q1', '1', 'q1')

        with self.assertRaises(IncompleteTransitionsError) as ctx:
            self.builder.build('q0')
        self.assertEqual(ctx.exception.missing, [('q0', '1'), ('q1', '0')])

    def test_start_state_must_exist(self):
        self.bind_all()
        with self.assertRaises(UnknownStateError):
            self.builder.build('q5')

        dfa = self.builder.build('q0')
        self.assertIsInstance(dfa, DFA)
        self.assertEqual(dfa.start_state, State('q0', False))

    def test_empty_automaton_gets_placeholder_start(self):
        dfa = DFATransitionBuilder([], ('a',)).build(None)

        self.assertEqual(dfa.start_state.name, 'Empty')
        self.assertFalse(dfa.start_state.is_accept)
        self.assertEqual(dfa.states, ())
        self.assertEqual(dfa.destinations('Empty', 'a'), ())


class TestNFATransitionBuilder(unittest.TestCase):
    def setUp(self):
        self.states = [State('q0', False), State('q1', False), State('q2', True)]
        self.builder = NFATransitionBuilder(self.states, ('a', 'b'))

    def test_statements_accumulate(self):
        self.builder.add_statement('(q0, a)->{q0}')
        self.builder.add_statement('(q0, a)->{q1, q0}')

        nfa = self.builder.build('q0')
        self.assertIsInstance(nfa, NFA)
        self.assertEqual(nfa.destinations('q0', 'a'), ('q0', 'q1'))
        self.assertEqual(nfa.destinations('q0', 'b'), ())

    def test_rejected_statement_changes_nothing(self):
        self.builder.add_statement('(q0, a)->{q0}')

        with self.assertRaises(UnknownStateError):
            self.builder.add_statement('(q0, a)->{q1, q9}')
        with self.assertRaises(UnknownSymbolError):
            self.builder.add_statement('(q0, c)->{q1}')
        with self.assertRaises(MalformedTransitionError):
            self.builder.add_statement('(q0, a)=>{q1}')

        nfa = self.builder.build('q0')
        self.assertEqual(nfa.destinations('q0', 'a'), ('q0',))

    def test_empty_destination_set(self):
        self.builder.add_statement('(q1, b)->{}')
        nfa = self.builder.build('q0')
        self.assertEqual(nfa.destinations('q1', 'b'), ())

    def test_punctuation_symbols(self):
        builder = NFATransitionBuilder(self.states, (',', ')'))
        builder.add_statement('(q0, ,)->{q1}')
        builder.add_statement('(q1, ))->{q2}')

        nfa = builder.build('q0')
        self.assertEqual(nfa.destinations('q0', ','), ('q1',))
        self.assertTrue(nfa.accepts(',)'))


class TestBuildAutomaton(unittest.TestCase):
    def setUp(self):
        self.dfa_definition = {
            'type': 'dfa',
            'states': ['q0', 'q1'],
            'alphabet': ['0', '1'],
            'transitions': {
                'q0': {'0': 'q0', '1': ['q1']},
                'q1': {'0': ['q0'], '1': 'q1'}
            },
            'startingState': 'q0',
            'acceptingStates': ['q1']
        }
        self.nfa_definition = {
            'type': 'nfa',
            'states': ['q0', 'q1', 'q2'],
            'alphabet': ['a', 'b'],
            'statements': ['(q0, a)->{q0, q1}', '(q1, b)->{q2}'],
            'startingState': 'q0',
            'acceptingStates': ['q2']
        }

    def test_build_dfa(self):
        dfa = build_automaton(self.dfa_definition)

        self.assertIsInstance(dfa, DFA)
        self.assertEqual(dfa.state_names, ('q0', 'q1'))
        self.assertEqual(dfa.alphabet, ('0', '1'))
        self.assertEqual(dfa.next_state('q1', '0'), 'q0')
        self.assertEqual([state.name for state in dfa.accept_states], ['q1'])

    def test_build_nfa_from_statements_and_transitions(self):
        self.nfa_definition['transitions'] = {'q2': {'a': ['q2']}}
        nfa = build_automaton(self.nfa_definition)

        self.assertIsInstance(nfa, NFA)
        self.assertEqual(nfa.destinations('q0', 'a'), ('q0', 'q1'))
        self.assertEqual(nfa.destinations('q2', 'a'), ('q2',))

    def test_to_dict_rebuilds_the_same_automaton(self):
        dfa = build_automaton(self.dfa_definition)
        self.assertEqual(build_automaton(dfa.to_dict()).to_dict(), dfa.to_dict())

        nfa = build_automaton(self.nfa_definition)
        self.assertEqual(nfa.to_dict()['transitions'], {
            'q0': {'a': ['q0', 'q1']},
            'q1': {'b': ['q2']},
            'q2': {}
        })

    def test_invalid_definitions(self):
        self.dfa_definition['states'] = ['q0', 'q0']
        with self.assertRaises(DuplicateStateError):
            build_automaton(self.dfa_definition)

        with self.assertRaises(InvalidDefinitionError):
            build_automaton({'states': ['q0']})
        with self.assertRaises(InvalidDefinitionError):
            build_automaton({'type': 'pda', 'states': [], 'alphabet': []})
        with self.assertRaises(InvalidDefinitionError):
            build_automaton([])

    def test_dfa_rejects_multiple_destinations(self):
        self.dfa_definition['transitions']['q0']['0'] = ['q0', 'q1']
        with self.assertRaises(InvalidDefinitionError):
            build_automaton(self.dfa_definition)

    def test_dfa_rejects_statements(self):
        self.dfa_definition['statements'] = ['(q0, 0)->{q1}']
        with self.assertRaises(InvalidDefinitionError):
            build_automaton(self.dfa_definition)

    def test_incomplete_dfa(self):
        del self.dfa_definition['transitions']['q1']
        with self.assertRaises(IncompleteTransitionsError):
            build_automaton(self.dfa_definition)

    def test_unknown_accepting_or_start_state(self):
        self.nfa_definition['acceptingStates'] = ['q7']
        with self.assertRaises(UnknownStateError):
            build_automaton(self.nfa_definition)

        self.nfa_definition['acceptingStates'] = ['q2']
        self.nfa_definition['startingState'] = 'q7'
        with self.assertRaises(UnknownStateError):
            build_automaton(self.nfa_definition)

    def test_multi_character_symbols_are_rejected(self):
        self.dfa_definition['alphabet'] = ['0', '10']
        with self.assertRaises(InvalidDefinitionError):
            build_automaton(self.dfa_definition)


if __name__ == '__main__':
    unittest.main()
