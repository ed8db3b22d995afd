"""Text formatting utilities for logging and presentation."""

from typing import Any, Iterable, List, Set


def format_set(s: Set[Any]) -> str:
    """Format set for consistent display."""
    if not s:
        return "∅"
    return "{" + ", ".join(sorted(str(x) for x in s)) + "}"


def format_entity(entity: Any) -> str:
    """Format an Entity as 'Species (sex) {traits}'."""
    sex = f" ({entity.sex.value})" if entity.sex is not None else ""
    return f"{entity.species.name}{sex} {format_set(set(entity.traits))}"


def format_pairing(pairing: Any) -> str:
    """Format a BreedPairing as 'father x mother -> child'."""
    return (
        f"{format_entity(pairing.father.entity)} x "
        f"{format_entity(pairing.mother.entity)} -> "
        f"{format_entity(pairing.child.entity)}"
    )


def format_instructions(steps: Iterable[Iterable[Any]]) -> str:
    """Render breeding steps (first step first) as numbered lines."""
    lines: List[str] = []
    for number, step in enumerate(steps, start=1):
        lines.append(f"Step {number}:")
        for pairing in step:
            lines.append(f"  {format_pairing(pairing)}")
    return "\n".join(lines)
