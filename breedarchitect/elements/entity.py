"""
Value types for breedable entities.

Species, Trait and Entity are immutable and hashable so they can be used as
keys in the pairing table and in the search's settled set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple


@dataclass(frozen=True)
class Trait:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Species:
    """
    A breedable kind.

    Equality and hashing use the name only. ``breed_rank`` drives the
    interpolation of child species, ``tie_order`` breaks exact ties.
    """

    name: str
    breed_rank: int = field(compare=False)
    tie_order: int = field(compare=False)
    species_id: Optional[int] = field(default=None, compare=False)

    def __str__(self) -> str:
        return self.name


class Sex(Enum):
    MALE = "male"
    FEMALE = "female"

    @staticmethod
    def matched(a: Optional[Sex], b: Optional[Sex]) -> bool:
        """Unknown sex pairs with anything; known sexes must differ."""
        if a is None or b is None:
            return True
        return a != b

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional[Sex]:
        if text is None:
            return None
        value = text.strip().lower()
        if not value:
            return None
        if value in ("m", "male"):
            return cls.MALE
        if value in ("f", "female"):
            return cls.FEMALE
        raise ValueError(f"Unknown sex: {text!r}")


@dataclass(frozen=True)
class Entity:
    species: Species
    sex: Optional[Sex] = None
    traits: FrozenSet[Trait] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        # Accept any iterable of traits but always store a frozenset
        if not isinstance(self.traits, frozenset):
            object.__setattr__(self, "traits", frozenset(self.traits))

    def dedup_key(self) -> Tuple[Species, FrozenSet[Trait]]:
        """Search-state identity: species and traits, ignoring sex."""
        return (self.species, self.traits)

    def __str__(self) -> str:
        names = ", ".join(sorted(t.name for t in self.traits))
        sex = f" ({self.sex.value})" if self.sex is not None else ""
        return f"{self.species.name}{sex} [{names}]"
