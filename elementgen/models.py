"""Core data models shared across elementgen components."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional, Tuple

MemberKind = Literal["input", "output"]


@dataclass(frozen=True)
class ComponentRef:
    """Identifies a component class, optionally pinned to a source file."""

    class_name: str
    file_path: Optional[str] = None


@dataclass(frozen=True)
class ReactiveMember:
    """One declared input or output on a component class."""

    name: str
    kind: MemberKind
    required: bool
    type_text: str
    alias: Optional[str] = None

    @property
    def effective_name(self) -> str:
        """Externally visible name: the alias when set, else the property name."""
        return self.alias or self.name


@dataclass(frozen=True)
class ComponentMetadata:
    """Fully analyzed view of one component."""

    tag: str
    class_name: str
    file_path: Path
    members: Tuple[ReactiveMember, ...] = ()

    @property
    def inputs(self) -> Tuple[ReactiveMember, ...]:
        return tuple(member for member in self.members if member.kind == "input")

    @property
    def outputs(self) -> Tuple[ReactiveMember, ...]:
        return tuple(member for member in self.members if member.kind == "output")


@dataclass(frozen=True)
class NormalizedElementEntry:
    """A ``tag -> component reference`` pair ready for resolution."""

    tag: str
    component: str
