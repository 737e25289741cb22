import sys

from django.core.management.base import BaseCommand

from automata.exceptions import AutomatonError
from automata.fsa_construction import (
    AlphabetBuilder,
    DFATransitionBuilder,
    NFATransitionBuilder,
    StateSetBuilder,
    parse_accept_flag,
    parse_cardinality,
)
from automata.fsa_rendering import (
    render_accept_states,
    render_alphabet,
    render_path,
    render_start_state,
    render_states,
    render_transition_function,
    render_tuple,
)
from automata.fsa_simulation import NFASimulationResult
from automata.session import AutomatonSession

MENU = """Finite automaton ({kind})
=============================
1. Create or replace the automaton.
2. Test a word.
3. Print the set of states.
4. Print the alphabet.
5. Print the start state.
6. Print the accept states.
7. Print the 5-tuple.
8. Print the transition function.
9. Quit."""


class EndOfInput(Exception):
    pass


class Command(BaseCommand):
    help = "Interactively define a DFA (or an NFA with --nfa) and test words against it."
    stealth_options = ('stdin',)

    def add_arguments(self, parser):
        parser.add_argument('--nfa', action='store_true', help='Build a non-deterministic automaton.')

    def handle(self, *args, **options):
        self.stdin = options.get('stdin') or sys.stdin
        self.kind = 'nfa' if options['nfa'] else 'dfa'
        session = AutomatonSession()

        try:
            self.stdout.write(f"Create a {self.describe_kind()}.\n")
            session.rebuild(self.build())
            self.menu(session)
        except EndOfInput:
            pass

        self.stdout.write("Thanks for using the program.")

    def describe_kind(self):
        return 'nondeterministic finite automaton' if self.kind == 'nfa' else 'deterministic finite automaton'

    def prompt(self, message):
        self.stdout.write(message)
        line = self.stdin.readline()
        if not line:
            raise EndOfInput()
        return line.rstrip('\r\n')

    def report(self, error):
        self.stdout.write(self.style.ERROR(str(error)))

    def ask_cardinality(self, message):
        while True:
            try:
                return parse_cardinality(self.prompt(message))
            except AutomatonError as e:
                self.report(e)

    def ask_alphabet(self):
        builder = AlphabetBuilder(self.ask_cardinality("Enter the size of the alphabet:"))
        while not builder.is_complete:
            try:
                builder.add(self.prompt(f"Enter symbol {builder.count + 1}:"))
            except AutomatonError as e:
                self.report(e)
        return builder.build()

    def ask_states(self):
        builder = StateSetBuilder(self.ask_cardinality("Enter the number of states:"))
        while not builder.is_complete:
            try:
                name = builder.check_name(self.prompt(f"Enter the name of state {builder.count}:"))
            except AutomatonError as e:
                self.report(e)
                continue

            while True:
                try:
                    is_accept = parse_accept_flag(self.prompt(f"Is '{name}' an accept state? (y/n):"))
                    break
                except AutomatonError as e:
                    self.report(e)

            builder.add(name, is_accept)
        return builder.build()

    def ask_dfa_transitions(self, builder):
        for state in builder.states:
            for symbol in builder.alphabet:
                while True:
                    try:
                        builder.bind(state.name, symbol,
                                     self.prompt(f"Enter the state reached from '{state.name}' on symbol {symbol}:"))
                        break
                    except AutomatonError as e:
                        self.report(e)

    def ask_nfa_transitions(self, builder):
        self.stdout.write("Enter transitions as (state, symbol)->{dest1, dest2, ...}, an empty line to finish:")
        while True:
            statement = self.prompt("Transition:").strip()
            if not statement:
                return
            try:
                state, symbol, targets = builder.add_statement(statement)
                self.stdout.write(f"δ({state}, {symbol}) = {{{', '.join(targets)}}}")
            except AutomatonError as e:
                self.report(e)

    def build(self):
        alphabet = self.ask_alphabet()
        states = self.ask_states()

        if self.kind == 'nfa':
            builder = NFATransitionBuilder(states, alphabet)
            self.ask_nfa_transitions(builder)
        else:
            builder = DFATransitionBuilder(states, alphabet)
            self.ask_dfa_transitions(builder)

        if not states:
            return builder.build(None)

        while True:
            try:
                return builder.build(self.prompt("Enter the start state:").strip())
            except AutomatonError as e:
                self.report(e)

    def test_word(self, session):
        word = self.prompt("Enter the word to test:")
        try:
            result = session.test_word(word)
        except AutomatonError as e:
            self.report(e)
            return

        if result.accepted:
            self.stdout.write(self.style.SUCCESS("The word is accepted by the automaton."))
            if isinstance(result, NFASimulationResult):
                for path in result.accepting_paths:
                    self.stdout.write(f"  {render_path(path)}")
        else:
            self.stdout.write(self.style.WARNING("The word is rejected by the automaton."))
            self.stdout.write(f"  {result.rejection_reason}")

    def menu(self, session):
        while True:
            choice = self.prompt(MENU.format(kind=session.automaton.kind.upper())).strip()
            current = session.automaton

            if choice == '1':
                session.rebuild(self.build())
                self.stdout.write("New automaton created.")
            elif choice == '2':
                self.test_word(session)
            elif choice == '3':
                self.stdout.write(f"States: {render_states(current)}")
            elif choice == '4':
                self.stdout.write(f"Alphabet: {render_alphabet(current)}")
            elif choice == '5':
                self.stdout.write(f"Start state: {render_start_state(current)}")
            elif choice == '6':
                self.stdout.write(f"Accept states: {render_accept_states(current)}")
            elif choice == '7':
                self.stdout.write(render_tuple(current))
            elif choice == '8':
                for line in render_transition_function(current) or ['(no transitions)']:
                    self.stdout.write(line)
            elif choice == '9':
                return
            else:
                self.report("Invalid option, try again.")
