from breedarchitect.search.tree_node import BreedTree, BreedTreeNode, NodeArena
from breedarchitect.search.tree_search import BreedTreeSearch, combine, search
from breedarchitect.search.reconstruction import (
    BreedPairing,
    breeding_instructions,
    compact_layers,
    pair_tree,
)

__all__ = [
    "BreedTree",
    "BreedTreeNode",
    "NodeArena",
    "BreedTreeSearch",
    "combine",
    "search",
    "BreedPairing",
    "breeding_instructions",
    "compact_layers",
    "pair_tree",
]
