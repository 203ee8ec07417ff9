"""
Substitution of ${property} placeholders in manifest values
"""

import re

_PROP_RE = re.compile(r"\$\{([^}]+)\}")

# Bounds on a single resolution; exceeding either leaves the value unresolved
MAX_EXPANDED_LENGTH = 8192
MAX_SUBSTITUTIONS = 1000


class UnresolvedPropertyError(Exception):
    """Raised internally when a placeholder cannot be substituted"""

    def __init__(self, name, reason):
        self.name = name
        self.reason = reason
        super().__init__(f"Cannot resolve ${{{name}}}: {reason}")


def has_placeholders(value):
    return isinstance(value, str) and _PROP_RE.search(value) is not None


def _substitute(value, properties, chain, budget):
    """
    Replace every placeholder in value, recursing into substituted values

    Args:
        value (str): Raw string
        properties (dict): Property table
        chain (frozenset): Property names being expanded along this substitution path
        budget (list): Single-element counter of substitutions left for the whole resolution

    Raises:
        UnresolvedPropertyError: On a missing property, a reference cycle or an oversized expansion
    """
    parts = []
    size = 0
    pos = 0
    for match in _PROP_RE.finditer(value):
        name = match.group(1).strip()
        if name in chain:
            raise UnresolvedPropertyError(name, "reference cycle")
        if name not in properties:
            raise UnresolvedPropertyError(name, "not defined")
        budget[0] -= 1
        if budget[0] < 0:
            raise UnresolvedPropertyError(name, f"more than {MAX_SUBSTITUTIONS} substitutions")

        literal = value[pos : match.start()]
        replacement = _substitute(properties[name], properties, chain | {name}, budget)
        size += len(literal) + len(replacement)
        if size > MAX_EXPANDED_LENGTH:
            raise UnresolvedPropertyError(name, f"expansion exceeds {MAX_EXPANDED_LENGTH} characters")
        parts.append(literal)
        parts.append(replacement)
        pos = match.end()
    parts.append(value[pos:])
    return "".join(parts)


def resolve_placeholders(value, properties, logger=None):
    """
    Resolve all ${name} placeholders in value using properties

    Substituted values may contain further placeholders; those are resolved
    too. A missing property, a self-referencing chain or an expansion past
    MAX_EXPANDED_LENGTH characters or MAX_SUBSTITUTIONS references leaves the
    value unresolved

    Args:
        value (str): Raw manifest value
        properties (dict): Mapping of property name to raw value
        logger (Logger): Optional logger instance

    Returns:
        str or None: Fully substituted value, or None if it cannot be resolved
    """
    if value is None:
        return None
    if not has_placeholders(value):
        return value
    try:
        return _substitute(value, properties or {}, frozenset(), [MAX_SUBSTITUTIONS])
    except UnresolvedPropertyError as e:
        logger and logger.debug(f"Unresolved property in '{value}': {e}")
        return None
