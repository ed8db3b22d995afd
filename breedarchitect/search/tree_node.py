"""
Search tree nodes.

Nodes live in a NodeArena and refer to their parents by arena index, so the
breeding tree is a DAG of plain values with no parent/child object cycles.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Hashable, List, Optional, Set

from breedarchitect.elements.entity import Entity

if TYPE_CHECKING:
    from breedarchitect.search.reconstruction import BreedPairing


@dataclass(frozen=True)
class BreedTreeNode:
    """
    One search state.

    Attributes:
        index: Position in the owning arena
        depth: 0 for leaves, otherwise max(parent depths) + 1
        tree_size: Number of distinct synthesized nodes in this node's
            ancestry, the node itself included (0 for leaves)
        entity: The entity held by this state
        father: Arena index of the first parent, None for leaves
        mother: Arena index of the second parent, None for leaves
    """

    index: int
    depth: int
    tree_size: int
    entity: Entity
    father: Optional[int] = None
    mother: Optional[int] = None

    @property
    def is_leaf(self) -> bool:
        return self.father is None and self.mother is None

    def state_key(self) -> Hashable:
        """
        Identity used by the settled set.

        Leaves keep their full entity so pool entries differing only by sex
        stay distinct; synthesized nodes ignore sex and ancestry.
        """
        if self.is_leaf:
            return ("leaf", self.entity)
        return ("bred", self.entity.dedup_key())


class NodeArena:
    """Append-only storage for the nodes created by one search."""

    def __init__(self):
        self._nodes: List[BreedTreeNode] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def __getitem__(self, index: int) -> BreedTreeNode:
        return self._nodes[index]

    def __iter__(self):
        return iter(self._nodes)

    def add_leaf(self, entity: Entity) -> BreedTreeNode:
        node = BreedTreeNode(len(self._nodes), 0, 0, entity)
        self._nodes.append(node)
        return node

    def add_child(
        self, entity: Entity, father: BreedTreeNode, mother: BreedTreeNode
    ) -> BreedTreeNode:
        node = BreedTreeNode(
            index=len(self._nodes),
            depth=max(father.depth, mother.depth) + 1,
            tree_size=len(self._synthesized_ancestry(father, mother)) + 1,
            entity=entity,
            father=father.index,
            mother=mother.index,
        )
        self._nodes.append(node)
        return node

    def father_of(self, node: BreedTreeNode) -> Optional[BreedTreeNode]:
        return None if node.father is None else self._nodes[node.father]

    def mother_of(self, node: BreedTreeNode) -> Optional[BreedTreeNode]:
        return None if node.mother is None else self._nodes[node.mother]

    def _synthesized_ancestry(self, *roots: BreedTreeNode) -> Set[int]:
        seen: Set[int] = set()
        stack = [r for r in roots if not r.is_leaf]
        while stack:
            node = stack.pop()
            if node.index in seen:
                continue
            seen.add(node.index)
            for parent in (self.father_of(node), self.mother_of(node)):
                if parent is not None and not parent.is_leaf:
                    stack.append(parent)
        return seen


@dataclass(frozen=True)
class BreedTree:
    """The winning node of a search together with the arena that owns it."""

    arena: NodeArena
    root: BreedTreeNode

    @property
    def entity(self) -> Entity:
        return self.root.entity

    def father_of(self, node: BreedTreeNode) -> Optional[BreedTreeNode]:
        return self.arena.father_of(node)

    def mother_of(self, node: BreedTreeNode) -> Optional[BreedTreeNode]:
        return self.arena.mother_of(node)

    def nodes(self) -> List[BreedTreeNode]:
        """All nodes reachable from the root, root first, each once."""
        seen: Set[int] = set()
        order: List[BreedTreeNode] = []
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.index in seen:
                continue
            seen.add(node.index)
            order.append(node)
            for parent in (self.mother_of(node), self.father_of(node)):
                if parent is not None:
                    stack.append(parent)
        return order

    def pair_tree(self) -> List[List[BreedPairing]]:
        """Layered pairings for this tree, final cross first."""
        from breedarchitect.search.reconstruction import pair_tree

        return pair_tree(self)
