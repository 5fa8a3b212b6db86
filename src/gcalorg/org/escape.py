"""Escaping of free text embedded in org-mode entries."""

_REPLACEMENTS = (
    ("[", "{"),
    ("]", "}"),
    ("\n*", "\n,*"),
)


def escape_org(text: str) -> str:
    """Neutralise org markup in a field value.

    Square brackets delimit org links, and a line starting with ``*``
    would be read as a new heading.
    """
    for old, new in _REPLACEMENTS:
        text = text.replace(old, new)
    return text
