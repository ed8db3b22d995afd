import pytest

from breedarchitect.breeding.pairing_table import PairingTable
from breedarchitect.config import PriorityMode, SearchConfig
from breedarchitect.elements.entity import Entity, Sex, Species
from breedarchitect.exceptions import (
    NoEligibleInputError,
    SearchBudgetExceededError,
    UnreachableTargetError,
)
from breedarchitect.search.tree_search import (
    BreedTreeSearch,
    combine,
    eligible_entities,
    priority_key,
    search,
)
from breedarchitect.search.tree_node import NodeArena


def test_combine_unions_traits_and_drops_sex(abc_species, abc_table, traits):
    A, C = abc_species["A"], abc_species["C"]
    father = Entity(A, Sex.MALE, frozenset({traits["x"]}))
    mother = Entity(C, Sex.FEMALE, frozenset({traits["y"], traits["z"]}))
    child = combine(abc_table, father, mother)
    assert child.species == abc_species["B"]
    assert child.sex is None
    assert child.traits == {traits["x"], traits["y"], traits["z"]}


def test_eligible_entities_filters_disallowed_traits(abc_species, traits):
    A = abc_species["A"]
    bare = Entity(A, Sex.MALE)
    allowed = Entity(A, Sex.FEMALE, frozenset({traits["x"]}))
    blocked = Entity(A, Sex.FEMALE, frozenset({traits["x"], traits["z"]}))
    pool = [bare, allowed, blocked, bare]

    assert eligible_entities(pool, frozenset({traits["x"]})) == [bare, allowed]
    assert eligible_entities(pool, None) == [bare, allowed, blocked]


def test_single_pairing(abc_species, abc_table):
    A, B, C = abc_species["A"], abc_species["B"], abc_species["C"]
    pool = [Entity(A, Sex.MALE), Entity(C, Sex.FEMALE)]

    tree = search(abc_table, pool, B)

    assert tree.entity.species == B
    assert tree.root.depth == 1
    assert tree.root.tree_size == 1
    assert tree.father_of(tree.root).entity == pool[0]
    assert tree.mother_of(tree.root).entity == pool[1]


def test_two_step_tree(abc_species, abc_table, traits, two_step_pool):
    B = abc_species["B"]
    target = {traits["x"], traits["y"]}

    tree = search(abc_table, two_step_pool, B, target, target)

    assert tree.entity.species == B
    assert tree.entity.traits == target
    assert tree.root.depth == 2
    assert tree.root.tree_size == 2

    father = tree.father_of(tree.root)
    mother = tree.mother_of(tree.root)
    assert not father.is_leaf
    assert father.entity.species == abc_species["A"]
    assert father.entity.traits == target
    assert mother.entity == two_step_pool[2]


def test_synthesized_nodes_pair_with_leaves_of_either_sex(
    abc_species, abc_table, traits, two_step_pool
):
    target = {traits["x"], traits["y"]}
    tree = search(abc_table, two_step_pool, abc_species["B"], target, target)

    # The bred parent has no sex and is paired with a male pool entity
    father = tree.father_of(tree.root)
    mother = tree.mother_of(tree.root)
    assert father.entity.sex is None
    assert mother.entity.sex is Sex.MALE


def test_same_sex_pool_entities_are_never_paired(abc_species, abc_table):
    A, B, C = abc_species["A"], abc_species["B"], abc_species["C"]
    pool = [Entity(A, Sex.MALE), Entity(C, Sex.MALE)]
    with pytest.raises(UnreachableTargetError):
        search(abc_table, pool, B)


def test_unknown_sex_pairs_with_anything(abc_species, abc_table):
    A, B, C = abc_species["A"], abc_species["B"], abc_species["C"]
    pool = [Entity(A, Sex.MALE), Entity(C, None)]
    assert search(abc_table, pool, B).entity.species == B


def test_sample_scenario_is_unreachable(abc_species, abc_table):
    A, B, C = abc_species["A"], abc_species["B"], abc_species["C"]
    # A x B gives A (tie broken by tie order); C can never be produced
    pool = [Entity(A, Sex.MALE), Entity(B, Sex.FEMALE)]
    with pytest.raises(UnreachableTargetError):
        search(abc_table, pool, C)


def test_missing_target_trait_is_unreachable(abc_species, abc_table, traits):
    A, B, C = abc_species["A"], abc_species["B"], abc_species["C"]
    pool = [Entity(A, Sex.MALE), Entity(C, Sex.FEMALE)]
    with pytest.raises(UnreachableTargetError):
        search(abc_table, pool, B, {traits["x"]}, {traits["x"]})


def test_override_scenario_returns_depth_one_node():
    A = Species("A", 0, 0)
    B = Species("B", 100, 1)
    table = PairingTable([A, B], overrides=[("A", "B", "A")])
    pool = [Entity(A, Sex.MALE), Entity(B, Sex.FEMALE)]

    tree = search(table, pool, A)

    assert tree.root.depth == 1
    assert not tree.root.is_leaf
    assert tree.entity.species == A


def test_no_eligible_input(abc_species, abc_table, traits):
    A, B = abc_species["A"], abc_species["B"]
    pool = [Entity(A, Sex.MALE, frozenset({traits["z"]}))]
    with pytest.raises(NoEligibleInputError):
        search(abc_table, pool, B, (), {traits["x"]})


def test_empty_pool_has_no_eligible_input(abc_species, abc_table):
    with pytest.raises(NoEligibleInputError):
        search(abc_table, [], abc_species["B"])


def test_result_satisfies_target(abc_species, abc_table, traits, two_step_pool):
    target = {traits["y"]}
    tree = search(abc_table, two_step_pool, abc_species["B"], target)
    assert tree.entity.species == abc_species["B"]
    assert target <= tree.entity.traits


def test_leaves_are_eligible_and_traits_are_inherited(
    abc_species, abc_table, traits, two_step_pool
):
    allowed = {traits["x"], traits["y"]}
    tree = search(abc_table, two_step_pool, abc_species["B"], allowed, allowed)

    for node in tree.nodes():
        if node.is_leaf:
            assert not node.entity.traits or node.entity.traits <= allowed
        else:
            parents = tree.father_of(node).entity.traits | tree.mother_of(node).entity.traits
            assert node.entity.traits == parents


def test_search_is_deterministic(abc_species, abc_table, traits, two_step_pool):
    target = {traits["x"], traits["y"]}
    first = search(abc_table, two_step_pool, abc_species["B"], target, target)
    second = search(abc_table, two_step_pool, abc_species["B"], target, target)
    assert first.entity == second.entity
    assert [n.entity for n in first.nodes()] == [n.entity for n in second.nodes()]


def test_depth_priority_mode(abc_species, abc_table, traits, two_step_pool):
    target = {traits["x"], traits["y"]}
    config = SearchConfig(priority=PriorityMode.DEPTH)
    tree = search(abc_table, two_step_pool, abc_species["B"], target, target, config)
    assert tree.entity.species == abc_species["B"]
    assert tree.entity.traits == target
    assert tree.root.depth == 2


def test_settled_budget_aborts_search(abc_species, abc_table, traits, two_step_pool):
    target = {traits["x"], traits["y"]}
    config = SearchConfig(max_settled_nodes=3)
    with pytest.raises(SearchBudgetExceededError):
        search(abc_table, two_step_pool, abc_species["B"], target, target, config)


def test_each_state_is_settled_once(abc_species, abc_table, traits, two_step_pool):
    target = {traits["x"], traits["y"]}
    solver = BreedTreeSearch(abc_table, two_step_pool, abc_species["B"], target, target)
    solver.solve()

    bred_keys = [k for k in solver.settled if k[0] == "bred"]
    assert len(bred_keys) == len(set(bred_keys))
    for key, index in solver.settled.items():
        assert solver.arena[index].state_key() == key


def test_priority_key_orders_by_tree_size_then_rank_then_traits(abc_species, traits):
    A, B = abc_species["A"], abc_species["B"]
    x, y = traits["x"], traits["y"]
    arena = NodeArena()
    leaf_a = arena.add_leaf(Entity(A, Sex.MALE, frozenset({x})))
    leaf_b = arena.add_leaf(Entity(B, Sex.FEMALE, frozenset({y})))
    near = arena.add_child(Entity(B, None, frozenset({y})), leaf_a, leaf_b)
    far = arena.add_child(Entity(A, None, frozenset({x, y})), leaf_a, leaf_b)
    deeper = arena.add_child(Entity(B, None, frozenset({x, y})), near, leaf_a)

    target, allowed = frozenset({x, y}), frozenset({x, y})
    keys = {
        n.index: priority_key(n, B, target, allowed)
        for n in (near, far, deeper)
    }
    assert keys[near.index] == (1, 0, -1, -1)
    assert keys[far.index] == (1, 10, -2, -2)
    assert keys[deeper.index] == (2, 0, -2, -2)
    assert sorted(keys, key=keys.get) == [near.index, far.index, deeper.index]


def test_no_self_pairing_and_no_pair_queued_twice(
    abc_species, abc_table, traits, two_step_pool
):
    target = {traits["x"], traits["y"]}
    solver = BreedTreeSearch(abc_table, two_step_pool, abc_species["B"], target, target)
    solver.solve()

    bred = [node for node in solver.arena if not node.is_leaf]
    assert bred
    assert all(node.father != node.mother for node in bred)

    pairs = [
        (solver.arena[node.father].entity, solver.arena[node.mother].entity)
        for node in bred
    ]
    assert len(pairs) == len(set(pairs))
