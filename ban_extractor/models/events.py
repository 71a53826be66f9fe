# Path: ban_extractor/models/events.py
"""
Structural Event Models

Events produced by the XML event source, one at a time, in document order.

Three kinds exist:
- ElementOpen: start tag with its attributes and namespace declarations
- Text: character data (entities already resolved)
- ElementClose: end tag

Names are qualified names exactly as written in the source ('att:Foo'),
never resolved to namespace URIs.
"""

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class ElementOpen:
    """
    Start tag event.

    Attributes:
        name: Qualified element name as written in the source
        attributes: (qualified name, raw value) pairs in document order
        namespace_declarations: Raw 'xmlns[:prefix]="uri"' strings in
            declaration order
    """
    name: str
    attributes: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    namespace_declarations: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Text:
    """Character data event."""
    data: str


@dataclass(frozen=True)
class ElementClose:
    """End tag event."""
    name: str


StructuralEvent = Union[ElementOpen, Text, ElementClose]


__all__ = [
    'ElementOpen',
    'Text',
    'ElementClose',
    'StructuralEvent',
]
