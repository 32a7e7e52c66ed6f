"""Memoization of derived results keyed on source data versions."""

import copy
import functools
import logging

logger = logging.getLogger('leaguehistory.cache')

CACHE_ATTR = '_derived_cache'


def derived(*sources: str):
    """
    Memoize a method whose result depends only on the given store sources.

    The decorated method's owner must expose a ``store`` with a
    ``versions(sources)`` method. A cached result is reused while the
    versions of every declared source are unchanged; any change triggers
    a full rebuild. Positional and keyword arguments must be hashable.

    Callers get a deep copy of the cached result, so sorting or editing a
    returned list never changes what later calls see.

    Example:
        class Stats:
            def __init__(self, store):
                self.store = store

            @derived('weekly', 'metadata')
            def weeks_with_data(self, season_id):
                ...
    """
    def decorator(method):
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            cache = self.__dict__.setdefault(CACHE_ATTR, {})
            key = (method.__name__, args, tuple(sorted(kwargs.items())))
            versions = self.store.versions(sources)

            cached = cache.get(key)
            if cached is not None and cached[0] == versions:
                return copy.deepcopy(cached[1])

            logger.debug(f'Rebuilding {method.__name__}{args} for source versions {versions}')
            result = method(self, *args, **kwargs)
            cache[key] = (versions, result)
            return copy.deepcopy(result)

        wrapper.sources = sources
        return wrapper

    return decorator


def clear_derived_cache(obj) -> None:
    """Drop every memoized result held by obj."""
    obj.__dict__.pop(CACHE_ATTR, None)
