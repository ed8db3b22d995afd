from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from breedarchitect.breeding.pairing_table import OverrideRecord, PairingTable
from breedarchitect.config import SearchConfig, TableConfig
from breedarchitect.elements.entity import Entity, Sex, Species, Trait
from breedarchitect.exceptions import SpeciesNotFoundError, TraitNotFoundError
from breedarchitect.search.reconstruction import BreedPairing, pair_tree
from breedarchitect.search.tree_node import BreedTree
from breedarchitect.search.tree_search import combine, search

logger = logging.getLogger(__name__)


class BreedCalculator:
    """
    Entry point for breeding tree queries.

    Holds the ingested species and traits by name and the pairing table built
    from them. Everything is read-only after construction, so one calculator
    can answer any number of calc_tree calls.

    Usage:
        calculator = BreedCalculator(traits, species, overrides)
        tree = calculator.calc_tree(pool, calculator.resolve_species("B"))
        layers = calculator.pair_tree(tree)
    """

    def __init__(
        self,
        traits: Sequence[Trait],
        species: Sequence[Species],
        overrides: Optional[Iterable[OverrideRecord]] = None,
        table_config: Optional[TableConfig] = None,
    ):
        table_config = table_config or TableConfig()
        self._traits: Dict[str, Trait] = {t.name: t for t in traits}
        self._species: Dict[str, Species] = {s.name: s for s in species}
        self.table = PairingTable(
            list(species),
            overrides,
            exclude_override_results=table_config.exclude_override_results,
        )
        logger.debug(
            "Calculator ready: %d species, %d traits",
            len(self._species),
            len(self._traits),
        )

    def resolve_species(self, name: str) -> Species:
        try:
            return self._species[name]
        except KeyError:
            raise SpeciesNotFoundError(name) from None

    def resolve_trait(self, name: str) -> Trait:
        try:
            return self._traits[name]
        except KeyError:
            raise TraitNotFoundError(name) from None

    def resolve_traits(self, names: Iterable[str]) -> frozenset:
        return frozenset(self.resolve_trait(n) for n in names)

    def make_entity(
        self,
        species_name: str,
        sex: Optional[Sex | str] = None,
        trait_names: Iterable[str] = (),
    ) -> Entity:
        """Build a pool entity from names, validating every name."""
        if isinstance(sex, str):
            sex = Sex.parse(sex)
        return Entity(
            self.resolve_species(species_name), sex, self.resolve_traits(trait_names)
        )

    def combine(self, a: Entity, b: Entity) -> Entity:
        return combine(self.table, a, b)

    def calc_tree(
        self,
        pool: Iterable[Entity],
        target_species: Species,
        target_traits: Iterable[Trait] = (),
        allowed_traits: Optional[Iterable[Trait]] = None,
        config: Optional[SearchConfig] = None,
    ) -> BreedTree:
        return search(
            self.table, pool, target_species, target_traits, allowed_traits, config
        )

    def pair_tree(self, tree: BreedTree) -> List[List[BreedPairing]]:
        return pair_tree(tree)
