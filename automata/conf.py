from django.conf import settings

DEFAULTS = {
    'NFA_MAX_PATHS': 10000,
    'NFA_DEDUPLICATE_PATHS': False,
    'SESSION_KEY': 'automaton',
}


def get_setting(name: str):
    """Read an entry of the AUTOMATA settings dictionary, falling back to DEFAULTS."""
    overrides = getattr(settings, 'AUTOMATA', {}) if settings.configured else {}
    return overrides.get(name, DEFAULTS[name])
