import json
import logging

from django.http import JsonResponse, StreamingHttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from .conf import get_setting
from .exceptions import AutomatonError, NoAutomatonError
from .fsa_construction import build_automaton
from .fsa_properties import check_all_properties
from .fsa_rendering import describe_automaton, render_path, render_transition_path
from .fsa_simulation import NFASimulationResult, simulate_fsa
from .session import AutomatonSession

logger = logging.getLogger(__name__)


def _error(error: AutomatonError, status=400):
    return JsonResponse({'error': str(error), 'code': error.code}, status=status)


def _load_session(request) -> AutomatonSession:
    """Rebuild the session automaton from the definition stored in the Django session."""
    return AutomatonSession.from_definition(request.session.get(get_setting('SESSION_KEY')))


def _parse_body(request):
    data = json.loads(request.body or b'{}')
    if not isinstance(data, dict):
        raise ValueError('Request body must be a JSON object')
    return data


def _simulation_payload(automaton, input_string, result):
    if isinstance(result, NFASimulationResult):
        return {
            'accepted': result.accepted,
            'type': 'nfa',
            'input': input_string,
            'accepting_paths': result.accepting_paths,
            'traces': [render_path(path) for path in result.accepting_paths],
            'num_paths': len(result.accepting_paths),
            'paths_explored': result.paths_explored,
            'rejection_reason': result.rejection_reason,
            'rejection_position': result.rejection_position,
        }

    return {
        'accepted': result.accepted,
        'type': 'dfa',
        'input': input_string,
        'path': result.path,
        'trace': render_transition_path(result.path, automaton.start_state.name),
        'final_state': result.final_state,
        'rejection_reason': result.rejection_reason,
        'rejection_position': result.rejection_position,
    }


@csrf_exempt
@require_http_methods(['GET', 'POST'])
def automaton(request):
    """
    GET returns the renderings of the current automaton.

    POST builds a new automaton from the JSON definition in the body and
    replaces the one stored in the session:
    - type: 'dfa' or 'nfa'
    - states, alphabet, acceptingStates, startingState
    - transitions and, for NFAs, statements
    """
    try:
        if request.method == 'GET':
            session = _load_session(request)
            return JsonResponse(session.describe())

        definition = _parse_body(request)
        session = _load_session(request)
        built = session.rebuild_from_definition(definition)
        request.session[get_setting('SESSION_KEY')] = built.to_dict()

        return JsonResponse(describe_automaton(built), status=201)

    except NoAutomatonError as e:
        return _error(e, status=404)
    except AutomatonError as e:
        return _error(e)
    except ValueError as e:
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        logger.exception("Failed to handle automaton request")
        return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)


@csrf_exempt
@require_POST
def test_word(request):
    """
    Test a word against the session automaton.

    Expects a POST request with a JSON body containing:
    - input: The word to test

    Returns the verdict with the DFA path or every accepting NFA path.
    """
    try:
        data = _parse_body(request)
        input_string = str(data.get('input', ''))

        session = _load_session(request)
        result = session.test_word(input_string)

        return JsonResponse(_simulation_payload(session.automaton, input_string, result))

    except NoAutomatonError as e:
        return _error(e, status=404)
    except AutomatonError as e:
        return _error(e)
    except ValueError as e:
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        logger.exception("Failed to test word")
        return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)


@csrf_exempt
@require_POST
def test_word_stream(request):
    """
    Stream the run of the session automaton as Server-Sent Events.

    NFAs emit one 'step' event per consumed symbol, then a 'summary' event.
    DFAs emit only the 'summary' event.
    """
    try:
        data = _parse_body(request)
        input_string = str(data.get('input', ''))
        session = _load_session(request)
        current = session.automaton

    except NoAutomatonError as e:
        return _error(e, status=404)
    except AutomatonError as e:
        return _error(e)
    except ValueError as e:
        return JsonResponse({'error': str(e)}, status=400)

    def result_generator():
        """Generator to stream simulation progress as Server-Sent Events"""
        try:
            result = simulate_fsa(current, input_string)

            if isinstance(result, NFASimulationResult):
                for step in result.steps:
                    yield f"data: {json.dumps({'type': 'step', 'position': step.position, 'symbol': step.symbol, 'live_paths': len(step.live_paths), 'dropped': step.dropped})}\n\n"

            summary = _simulation_payload(current, input_string, result)
            summary['type'] = 'summary'
            summary['automaton'] = current.kind
            yield f"data: {json.dumps(summary)}\n\n"

            yield f"data: {json.dumps({'type': 'end'})}\n\n"

        except AutomatonError as e:
            yield f"data: {json.dumps({'type': 'error', 'message': str(e), 'code': e.code})}\n\n"
        except Exception as e:
            logger.exception("Failed to stream simulation")
            yield f"data: {json.dumps({'type': 'error', 'message': f'Server error: {str(e)}'})}\n\n"

    response = StreamingHttpResponse(result_generator(), content_type='text/event-stream')
    response['Cache-Control'] = 'no-cache'
    response['X-Accel-Buffering'] = 'no'
    return response


@require_GET
def properties(request):
    """Property checks (deterministic, complete, connected) of the session automaton."""
    try:
        current = _load_session(request).automaton

        return JsonResponse({
            'properties': check_all_properties(current),
            'summary': {
                'type': current.kind,
                'total_states': len(current.states),
                'alphabet_size': len(current.alphabet),
                'starting_state': current.start_state.name,
                'accepting_states_count': len(current.accept_states),
            }
        })

    except NoAutomatonError as e:
        return _error(e, status=404)
    except AutomatonError as e:
        return _error(e)
    except Exception as e:
        logger.exception("Failed to check properties")
        return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)


@csrf_exempt
@require_POST
def simulate(request):
    """
    Stateless simulation: build the automaton from the request and run one word.

    Expects a POST request with a JSON body containing:
    - fsa: The automaton definition
    - input: The input string to simulate
    """
    try:
        data = _parse_body(request)
        fsa = data.get('fsa')
        input_string = str(data.get('input', ''))

        if not fsa:
            return JsonResponse({'error': 'Missing FSA definition', 'code': 'invalid_definition'}, status=400)

        built = build_automaton(fsa)
        result = simulate_fsa(built, input_string)

        return JsonResponse(_simulation_payload(built, input_string, result))

    except AutomatonError as e:
        return _error(e)
    except ValueError as e:
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        logger.exception("Failed to simulate")
        return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)
