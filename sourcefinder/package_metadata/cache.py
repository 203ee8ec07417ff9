"""
Memoization of resolved source URLs
"""

import threading


class ResolutionCache:
    """
    Thread-safe memo of resolution results keyed by dependency identity

    Concurrent first lookups of the same key run the resolver once; the other
    callers wait for and share its result. Absence (None) is cached like any
    other result. A resolver that raises leaves the key unpopulated
    """

    def __init__(self):
        self._results = {}
        self._key_locks = {}
        self._guard = threading.Lock()

    def __contains__(self, key):
        with self._guard:
            return key in self._results

    def __len__(self):
        with self._guard:
            return len(self._results)

    def get_or_resolve(self, key, resolve):
        """
        Return the cached result for key, computing it with resolve() on first use

        Args:
            key (hashable): Cache key, e.g. Dependency.cache_key
            resolve (callable): Zero-argument function producing the result

        Returns:
            The cached or freshly computed result
        """
        with self._guard:
            if key in self._results:
                return self._results[key]
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            with self._guard:
                if key in self._results:
                    return self._results[key]
            result = resolve()
            with self._guard:
                self._results[key] = result
                self._key_locks.pop(key, None)
            return result

    def clear(self):
        with self._guard:
            self._results.clear()
