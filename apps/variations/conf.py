"""
Engine settings, read from ``settings.VARIATIONS`` with these defaults.
"""

from django.conf import settings


DEFAULTS = {
    'NAME_SEPARATOR': ' \\ ',
    'PATH_SEPARATOR': ' > ',
    'MAX_COMBINATIONS': 10000,
    'DRAFT_CACHE_ALIAS': 'default',
    'DRAFT_CACHE_PREFIX': 'variations:draft',
    'DRAFT_CACHE_TIMEOUT': 60 * 60 * 24 * 7,
}


def get_setting(name):
    if name not in DEFAULTS:
        raise KeyError(f"Unknown variations setting {name!r}")
    return getattr(settings, 'VARIATIONS', {}).get(name, DEFAULTS[name])
