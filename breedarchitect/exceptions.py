"""
Custom exceptions for the breeding tree calculator.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Collection, NoReturn

if TYPE_CHECKING:
    from breedarchitect.elements.entity import Species


class BreedArchitectError(Exception):
    """Base exception for breeding tree errors."""

    pass


class ConfigurationError(BreedArchitectError):
    """Raised when the pairing table cannot be built from the given records."""

    @staticmethod
    def raise_no_candidates(excluded: Collection[Species]) -> NoReturn:
        """
        Raises a ConfigurationError when no species is left to interpolate with.

        Args:
            excluded: Species removed from interpolation because overrides
                produce them

        Raises:
            ConfigurationError: Always raised with detailed error information
        """
        from breedarchitect.logger import bt_logger

        names = ", ".join(sorted(s.name for s in excluded))
        message = (
            f"No species left for breed rank interpolation: every species "
            f"({names}) is an override result"
        )
        if not bt_logger.disabled:
            bt_logger.error(message)
        raise ConfigurationError(message)


class EntityNotFoundError(BreedArchitectError, KeyError):
    """Raised when a name does not resolve to an ingested record."""

    kind = "entity"

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"No {self.kind} found: {self.name!r}"


class SpeciesNotFoundError(EntityNotFoundError):
    kind = "species"


class TraitNotFoundError(EntityNotFoundError):
    kind = "trait"


class PairingLookupError(BreedArchitectError):
    """Raised when a species is missing from the pairing table."""

    pass


class NoEligibleInputError(BreedArchitectError):
    """Raised when no pool entity survives the allowed-trait filter."""

    pass


class UnreachableTargetError(BreedArchitectError):
    """Raised when the search frontier is exhausted without reaching the target."""

    pass


class SearchBudgetExceededError(BreedArchitectError):
    """Raised when the settled set grows past the configured budget."""

    def __init__(self, budget: int):
        super().__init__(f"Search aborted after settling more than {budget} nodes")
        self.budget = budget
