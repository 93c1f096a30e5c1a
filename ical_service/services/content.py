"""Content lines and the components that collect them."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from ical_service.services.errors import InvalidValueError

__all__ = [
    "LINE_SEPARATOR",
    "MAX_LINE_LENGTH",
    "Component",
    "ContentLine",
    "fold_line",
    "unfold",
]

LINE_SEPARATOR = "\r\n"
MAX_LINE_LENGTH = 75
CONTINUATION_PREFIX = " "

Parameter = Tuple[str, str]


def fold_line(line: str) -> str:
    """Split ``line`` into physical lines of at most 75 octets.

    The leading space of a continuation line counts toward its 75 octets.
    Characters are never split, so a line may end short of the limit when
    the next character is a multi-byte sequence. Every physical line,
    including the last, ends with CRLF.
    """

    physical: List[str] = []
    current: List[str] = []
    size = 0
    for char in line:
        width = len(char.encode("utf-8"))
        if size + width > MAX_LINE_LENGTH:
            physical.append("".join(current))
            current = [CONTINUATION_PREFIX]
            size = len(CONTINUATION_PREFIX)
        current.append(char)
        size += width
    physical.append("".join(current))
    return "".join(part + LINE_SEPARATOR for part in physical)


def unfold(text: str) -> str:
    """Join folded physical lines back into logical content lines."""

    return text.replace(LINE_SEPARATOR + CONTINUATION_PREFIX, "")


@dataclass(frozen=True)
class ContentLine:
    """One ``NAME;PARAM=VALUE:VALUE`` property entry.

    ``value`` and the parameter values must already be escaped; parameters
    keep their insertion order.
    """

    name: str
    value: str
    parameters: Tuple[Parameter, ...] = ()

    def __post_init__(self) -> None:
        parameters = tuple((str(key), str(value)) for key, value in self.parameters)
        seen = set()
        for key, _ in parameters:
            normalized = key.upper()
            if normalized in seen:
                raise InvalidValueError(f"Duplicate parameter {key!r} on property {self.name}.")
            seen.add(normalized)
        object.__setattr__(self, "parameters", parameters)

    def unfolded(self) -> str:
        params = "".join(f";{key}={value}" for key, value in self.parameters)
        return f"{self.name}{params}:{self.value}"

    def render(self) -> str:
        return fold_line(self.unfolded())

    def __str__(self) -> str:
        return self.render()


@dataclass
class Component:
    """A ``BEGIN``/``END`` delimited block of content lines.

    Lines are rendered in the order they were added, followed by any nested
    components.
    """

    name: str
    lines: List[ContentLine] = field(default_factory=list)
    components: List["Component"] = field(default_factory=list)

    def add(self, line: ContentLine) -> "Component":
        self.lines.append(line)
        return self

    def extend(self, lines: Iterable[ContentLine]) -> "Component":
        self.lines.extend(lines)
        return self

    def add_component(self, component: "Component") -> "Component":
        self.components.append(component)
        return self

    def render(self) -> str:
        parts = [ContentLine("BEGIN", self.name).render()]
        parts.extend(line.render() for line in self.lines)
        parts.extend(component.render() for component in self.components)
        parts.append(ContentLine("END", self.name).render())
        return "".join(parts)

    def __str__(self) -> str:
        return self.render()

