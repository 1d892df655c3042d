"""Search of a named substructure in a decoded API response."""

from .models import JSONValue


def _children(value: JSONValue):
    if isinstance(value, dict):
        return value.values()
    if isinstance(value, list):
        return value
    return ()


def find_substructure(haystack: JSONValue, needle: str = "thumbnails") -> JSONValue:
    """
    Return the value stored under `needle` in the first mapping that holds it.

    The search is depth first: every child of `haystack` is checked for the
    key and then searched itself before moving on to its next sibling, so
    the match returned is not necessarily the shallowest one. `haystack`
    itself is never checked, only its descendants.

    Returns None when the key appears nowhere.
    """
    for child in _children(haystack):
        if not isinstance(child, (dict, list)):
            continue
        if isinstance(child, dict) and needle in child:
            return child[needle]
        found = find_substructure(child, needle)
        if found is not None:
            return found
    return None
