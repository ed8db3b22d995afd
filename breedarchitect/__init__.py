"""Breeding tree calculator: pairing tables and best-first breeding search."""

from breedarchitect.elements.entity import Entity, Sex, Species, Trait
from breedarchitect.breeding.pairing_table import PairingTable
from breedarchitect.breeding.calculator import BreedCalculator
from breedarchitect.config import PriorityMode, SearchConfig, TableConfig
from breedarchitect.search import (
    BreedPairing,
    BreedTree,
    BreedTreeNode,
    breeding_instructions,
    pair_tree,
    search,
)

__all__ = [
    "Entity",
    "Sex",
    "Species",
    "Trait",
    "PairingTable",
    "BreedCalculator",
    "PriorityMode",
    "SearchConfig",
    "TableConfig",
    "BreedPairing",
    "BreedTree",
    "BreedTreeNode",
    "breeding_instructions",
    "pair_tree",
    "search",
]
