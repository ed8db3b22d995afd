"""
Tree Reconstruction

Turns a winning search node into layers of pairings for presentation.

Layer 0 holds the final cross; each following layer holds the pairings that
produce the parents used one layer above. Pairings of two pool entities need
no preparation, so compaction moves them from intermediate layers to the
deepest layer, which is performed first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Set

from breedarchitect.search.tree_node import BreedTree, BreedTreeNode

Layer = List["BreedPairing"]


@dataclass(frozen=True)
class BreedPairing:
    father: BreedTreeNode
    mother: BreedTreeNode
    child: BreedTreeNode

    @property
    def is_trivial(self) -> bool:
        """Both parents come straight from the input pool."""
        return self.father.is_leaf and self.mother.is_leaf


def _raw_layers(tree: BreedTree) -> List[Layer]:
    layers: List[Layer] = []
    layer: List[BreedTreeNode] = [tree.root]
    while layer:
        records: Layer = []
        next_layer: Dict[int, BreedTreeNode] = {}
        for node in layer:
            father = tree.father_of(node)
            mother = tree.mother_of(node)
            if father is None or mother is None:
                continue
            records.append(BreedPairing(father, mother, node))
            next_layer.setdefault(father.index, father)
            next_layer.setdefault(mother.index, mother)
        layers.append(records)
        layer = list(next_layer.values())
    return layers


def compact_layers(layers: List[Layer]) -> List[Layer]:
    """
    Move every pool-only pairing into the deepest layer and drop empty layers.

    The input is not modified.
    """
    if not layers:
        return []
    compacted = [list(layer) for layer in layers]
    deepest = compacted[-1]
    moved: Set[int] = {p.child.index for p in deepest}
    for layer in compacted[:-1]:
        kept: Layer = []
        for pairing in layer:
            if not pairing.is_trivial:
                kept.append(pairing)
            elif pairing.child.index not in moved:
                moved.add(pairing.child.index)
                deepest.append(pairing)
        layer[:] = kept
    return [layer for layer in compacted if layer]


def pair_tree(tree: BreedTree) -> List[Layer]:
    """
    Layered pairings for a search result, final cross first.

    Within a layer each node appears once, in order of first appearance.
    """
    return compact_layers(_raw_layers(tree))


def breeding_instructions(layers: List[Layer]) -> List[Layer]:
    """Layers in the order they have to be performed, final cross last."""
    return list(reversed(layers))
