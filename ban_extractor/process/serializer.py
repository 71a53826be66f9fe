# Path: ban_extractor/process/serializer.py
"""
Fragment Re-Serializer

Renders StructuralEvent objects back into XML text.

Stateless: every function maps one event to its textual form. Attribute
values and character data are entity-escaped; element and attribute names
are written unchanged.
"""

from ..models.events import ElementClose, ElementOpen, StructuralEvent, Text


# XML 1.0 predefined entities. '&' must be replaced first.
_ESCAPES: tuple[tuple[str, str], ...] = (
    ('&', '&amp;'),
    ('<', '&lt;'),
    ('>', '&gt;'),
    ('"', '&quot;'),
    ("'", '&apos;'),
)


def escape_xml(value: str) -> str:
    """
    Escape a string for use as XML character data or attribute value.

    Args:
        value: Unescaped text

    Returns:
        Text with &, <, >, " and ' replaced by entity references

    Example:
        escape_xml('a&b')  # 'a&amp;b'
    """
    for char, entity in _ESCAPES:
        if char in value:
            value = value.replace(char, entity)
    return value


def render_open(event: ElementOpen) -> str:
    """Render a start tag: attributes first, then namespace declarations."""
    parts = [f'<{event.name}']
    for name, value in event.attributes:
        parts.append(f' {name}="{escape_xml(value)}"')
    for declaration in event.namespace_declarations:
        parts.append(f' {declaration}')
    parts.append('>')
    return ''.join(parts)


def render_close(event: ElementClose) -> str:
    return f'</{event.name}>'


def render_text(event: Text) -> str:
    return escape_xml(event.data)


def render_event(event: StructuralEvent) -> str:
    """
    Render any structural event.

    Args:
        event: ElementOpen, Text or ElementClose

    Returns:
        XML text of the event

    Raises:
        TypeError: If event is not a structural event
    """
    if isinstance(event, ElementOpen):
        return render_open(event)
    if isinstance(event, Text):
        return render_text(event)
    if isinstance(event, ElementClose):
        return render_close(event)
    raise TypeError(f"Not a structural event: {event!r}")


__all__ = [
    'escape_xml',
    'render_open',
    'render_close',
    'render_text',
    'render_event',
]
