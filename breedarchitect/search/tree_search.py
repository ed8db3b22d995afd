"""
Breeding Tree Search

Best-first search over entities reachable by repeated pairing.

Every pool entity allowed by the trait filter becomes a settled leaf. Pairs of
sex-compatible leaves seed a priority queue. Each pop settles a new state
(first settled wins, later duplicates are dropped) and pairs it with every
state settled so far. The search stops at the first settled state whose
species is the target and whose traits cover the target traits.

Priority Key (smaller values first):
    1. Tree size (fewer pairings)
    2. Distance between the candidate's breed rank and the target's
    3. Number of target traits carried (more first)
    4. Number of allowed traits carried (more first)
    5. Insertion order (deterministic tie-breaker)
"""

from __future__ import annotations

import heapq
import itertools
import logging
from typing import (
    AbstractSet,
    Dict,
    FrozenSet,
    Hashable,
    Iterable,
    List,
    Optional,
    Set,
    Tuple,
)

from breedarchitect.breeding.pairing_table import PairingTable
from breedarchitect.config import PriorityMode, SearchConfig
from breedarchitect.elements.entity import Entity, Sex, Species, Trait
from breedarchitect.exceptions import (
    NoEligibleInputError,
    SearchBudgetExceededError,
    UnreachableTargetError,
)
from breedarchitect.logger import bt_logger, format_entity, format_set
from breedarchitect.search.tree_node import BreedTree, BreedTreeNode, NodeArena

PriorityKey = Tuple[int, ...]


def combine(table: PairingTable, a: Entity, b: Entity) -> Entity:
    """Child of a x b: table species, union of traits, sex left unknown."""
    return Entity(table.child(a.species, b.species), None, a.traits | b.traits)


def eligible_entities(
    pool: Iterable[Entity], allowed_traits: Optional[AbstractSet[Trait]]
) -> List[Entity]:
    """
    Filter the pool down to entities whose traits are all allowed.

    Entities without traits are always eligible. Duplicates (by full
    equality) are dropped, keeping the first occurrence.
    """
    seen: Set[Entity] = set()
    result: List[Entity] = []
    for entity in pool:
        if entity in seen:
            continue
        seen.add(entity)
        if (
            not entity.traits
            or allowed_traits is None
            or entity.traits <= allowed_traits
        ):
            result.append(entity)
    return result


def priority_key(
    node: BreedTreeNode,
    target_species: Species,
    target_traits: FrozenSet[Trait],
    allowed_traits: Optional[FrozenSet[Trait]],
    mode: PriorityMode = PriorityMode.TREE_SIZE,
) -> PriorityKey:
    entity = node.entity
    rank_distance = abs(entity.species.breed_rank - target_species.breed_rank)
    if mode is PriorityMode.DEPTH:
        return (
            node.depth,
            rank_distance,
            abs(len(entity.traits) - len(target_traits)),
        )
    shared_allowed = len(entity.traits & allowed_traits) if allowed_traits else 0
    return (
        node.tree_size,
        rank_distance,
        -len(entity.traits & target_traits),
        -shared_allowed,
    )


class BreedTreeSearch:
    """
    Stateful solver for one breeding tree query.

    Each instance owns its arena, settled set, visited pairs and queue, so a
    shared PairingTable can serve any number of searches.

    Usage:
        search = BreedTreeSearch(table, pool, target, {trait}, allowed)
        tree = search.solve()
    """

    def __init__(
        self,
        table: PairingTable,
        pool: Iterable[Entity],
        target_species: Species,
        target_traits: Iterable[Trait] = (),
        allowed_traits: Optional[Iterable[Trait]] = None,
        config: Optional[SearchConfig] = None,
    ):
        self.table = table
        self.pool = list(pool)
        self.target_species = target_species
        self.target_traits: FrozenSet[Trait] = frozenset(target_traits)
        self.allowed_traits: Optional[FrozenSet[Trait]] = (
            frozenset(allowed_traits) if allowed_traits is not None else None
        )
        self.config = config or SearchConfig()
        self.log = logging.getLogger(self.config.logger_name)

        self.arena = NodeArena()
        self.settled: Dict[Hashable, int] = {}
        self.visited: Set[Tuple[Entity, Entity]] = set()
        self._queue: List[Tuple[PriorityKey, int, BreedTreeNode]] = []
        self._counter = itertools.count()

    def is_target(self, node: BreedTreeNode) -> bool:
        entity = node.entity
        return (
            entity.species == self.target_species
            and self.target_traits <= entity.traits
        )

    def _push(self, father: BreedTreeNode, mother: BreedTreeNode) -> None:
        child = combine(self.table, father.entity, mother.entity)
        node = self.arena.add_child(child, father, mother)
        key = priority_key(
            node,
            self.target_species,
            self.target_traits,
            self.allowed_traits,
            self.config.priority,
        )
        heapq.heappush(self._queue, (key, next(self._counter), node))

    def _settle(self, node: BreedTreeNode) -> bool:
        """Add node to the settled set; False if its state is already settled."""
        key = node.state_key()
        if key in self.settled:
            return False
        self.settled[key] = node.index
        budget = self.config.max_settled_nodes
        if budget is not None and len(self.settled) > budget and not self.is_target(node):
            raise SearchBudgetExceededError(budget)
        return True

    def _seed(self) -> None:
        entities = eligible_entities(self.pool, self.allowed_traits)
        if not entities:
            raise NoEligibleInputError(
                f"No input entity is eligible under allowed traits "
                f"{format_set(set(self.allowed_traits or ()))}"
            )

        leaves: List[BreedTreeNode] = []
        for entity in entities:
            leaf = self.arena.add_leaf(entity)
            if self._settle(leaf):
                leaves.append(leaf)

        # Sex is only checked between pool entities
        for a, b in itertools.combinations(leaves, 2):
            if not Sex.matched(a.entity.sex, b.entity.sex):
                continue
            pair = (a.entity, b.entity)
            if pair in self.visited:
                continue
            self.visited.add(pair)
            self._push(a, b)

        self.log.debug("Seeded %d leaves, %d candidates", len(leaves), len(self._queue))

    def solve(self) -> BreedTree:
        """
        Run the search.

        Returns:
            The tree rooted at the first settled node matching the target

        Raises:
            NoEligibleInputError: If the trait filter leaves no pool entity
            UnreachableTargetError: If the queue empties without a match
            SearchBudgetExceededError: If max_settled_nodes is exceeded
        """
        if not bt_logger.disabled:
            bt_logger.section(
                f"Searching for {self.target_species.name} "
                f"{format_set(set(self.target_traits))}"
            )
        self._seed()

        popped = 0
        while self._queue:
            _, _, node = heapq.heappop(self._queue)
            popped += 1
            if not self._settle(node):
                continue

            if bt_logger.is_tracing():
                bt_logger.debug(
                    f"Settled {format_entity(node.entity)} "
                    f"(depth {node.depth}, size {node.tree_size})"
                )

            if self.is_target(node):
                self.log.debug(
                    "Found %s after %d pops, %d settled",
                    format_entity(node.entity),
                    popped,
                    len(self.settled),
                )
                if not bt_logger.disabled:
                    bt_logger.result("Result", format_entity(node.entity))
                return BreedTree(self.arena, node)

            for other_index in list(self.settled.values()):
                other = self.arena[other_index]
                if other.index == node.index:
                    continue
                pair = (node.entity, other.entity)
                if pair in self.visited:
                    continue
                self.visited.add(pair)
                self._push(node, other)

        if not bt_logger.disabled:
            bt_logger.warning("Queue exhausted without reaching the target")
        raise UnreachableTargetError(
            f"No breeding tree produces {self.target_species.name} with traits "
            f"{format_set(set(self.target_traits))} from the given pool"
        )


def search(
    table: PairingTable,
    pool: Iterable[Entity],
    target_species: Species,
    target_traits: Iterable[Trait] = (),
    allowed_traits: Optional[Iterable[Trait]] = None,
    config: Optional[SearchConfig] = None,
) -> BreedTree:
    """Find a breeding tree for the target; see BreedTreeSearch."""
    return BreedTreeSearch(
        table, pool, target_species, target_traits, allowed_traits, config
    ).solve()
