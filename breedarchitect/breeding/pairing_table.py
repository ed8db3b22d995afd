"""
Pairing Table

Precomputes the child species for every ordered pair of species.

Ordinary pairs interpolate on breed rank: the truncated average of both
parents' ranks is matched against the nearest candidate rank at or above it
(ceiling) and at or below it (floor). The closer side wins; an exact tie goes
to the species with the smaller tie order. Special pairs listed as overrides
bypass the interpolation entirely.

The interpolation is evaluated for all pairs at once on species-index
matrices, then overrides are written on top.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

import numpy as np

from breedarchitect.elements.entity import Species
from breedarchitect.exceptions import ConfigurationError, PairingLookupError
from breedarchitect.logger import bt_logger

logger = logging.getLogger(__name__)

OverrideRecord = Tuple[str, str, str]


def truncated_average(sums: np.ndarray) -> np.ndarray:
    """Halve integer sums rounding toward zero (not toward negative infinity)."""
    return np.sign(sums) * (np.abs(sums) // 2)


def _build_rank_index(
    species: Sequence[Species], excluded: Set[Species]
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Map each candidate breed rank to the species index holding it.

    Duplicate ranks resolve last-writer-wins, in input order.

    Returns:
        (sorted candidate ranks, species index for each rank)
    """
    rank_to_index: Dict[int, int] = {}
    for i, s in enumerate(species):
        if s in excluded:
            continue
        rank_to_index[s.breed_rank] = i

    ranks = sorted(rank_to_index)
    return (
        np.array(ranks, dtype=np.int64),
        np.array([rank_to_index[r] for r in ranks], dtype=np.int64),
    )


def _resolve_overrides(
    overrides: Iterable[OverrideRecord], by_name: Dict[str, int]
) -> List[Tuple[int, int, int]]:
    resolved: List[Tuple[int, int, int]] = []
    for x, y, result in overrides:
        missing = [name for name in (x, y, result) if name not in by_name]
        if missing:
            raise ConfigurationError(
                f"Override ({x}, {y}) -> {result} names unknown species: "
                f"{', '.join(missing)}"
            )
        resolved.append((by_name[x], by_name[y], by_name[result]))
    return resolved


def _interpolate(
    species: Sequence[Species],
    cand_ranks: np.ndarray,
    cand_indices: np.ndarray,
) -> np.ndarray:
    """Child species index for every ordered pair, by rank interpolation."""
    ranks = np.array([s.breed_rank for s in species], dtype=np.int64)
    tie_orders = np.array([s.tie_order for s in species], dtype=np.int64)

    average = truncated_average(ranks[:, None] + ranks[None, :])
    n_cand = len(cand_ranks)

    # First candidate >= average, last candidate <= average
    ceil_pos = np.searchsorted(cand_ranks, average, side="left")
    floor_pos = np.searchsorted(cand_ranks, average, side="right") - 1
    has_ceil = ceil_pos < n_cand
    has_floor = floor_pos >= 0

    ceil_pos = np.clip(ceil_pos, 0, n_cand - 1)
    floor_pos = np.clip(floor_pos, 0, n_cand - 1)
    ceil_idx = cand_indices[ceil_pos]
    floor_idx = cand_indices[floor_pos]

    distance_above = cand_ranks[ceil_pos] - average
    distance_below = average - cand_ranks[floor_pos]
    floor_wins = (distance_below < distance_above) | (
        (distance_below == distance_above) & (tie_orders[floor_idx] < tie_orders[ceil_idx])
    )

    choose_floor = ~has_ceil | (has_floor & floor_wins)
    return np.where(choose_floor, floor_idx, ceil_idx)


class PairingTable:
    """
    Total mapping from (species, species) to child species.

    Usage:
        table = PairingTable(species, overrides=[("A", "B", "C")])
        child = table.child(a, b)
    """

    def __init__(
        self,
        species: Sequence[Species],
        overrides: Optional[Iterable[OverrideRecord]] = None,
        exclude_override_results: bool = True,
    ):
        """
        Build the table.

        Args:
            species: All known species
            overrides: Special pairs as (name_x, name_y, result_name) triples,
                registered for both orderings
            exclude_override_results: When True, any species produced by an
                override is reachable only through that override and never
                through interpolation

        Raises:
            ConfigurationError: If an override names an unknown species, or if
                no interpolation candidate remains
        """
        self._species: List[Species] = list(species)
        self._index: Dict[Species, int] = {}
        for i, s in enumerate(self._species):
            self._index[s] = i
        by_name = {s.name: i for s, i in self._index.items()}

        resolved = _resolve_overrides(overrides or (), by_name)
        excluded: Set[Species] = set()
        if exclude_override_results:
            excluded = {self._species[r] for _, _, r in resolved}

        n = len(self._species)
        if n == 0:
            self._matrix = np.zeros((0, 0), dtype=np.int64)
            return

        cand_ranks, cand_indices = _build_rank_index(self._species, excluded)
        if len(cand_ranks) == 0:
            ConfigurationError.raise_no_candidates(excluded)

        matrix = _interpolate(self._species, cand_ranks, cand_indices)
        for x, y, r in resolved:
            matrix[x, y] = r
            matrix[y, x] = r
        self._matrix = matrix

        logger.debug(
            "Built pairing table for %d species (%d overrides, %d excluded)",
            n,
            len(resolved),
            len(excluded),
        )
        if not bt_logger.disabled:
            bt_logger.section("Pairing table")
            bt_logger.log_pairing_rows(list(self.rows()))

    @property
    def species(self) -> List[Species]:
        return list(self._species)

    def __contains__(self, species: object) -> bool:
        return species in self._index

    def __len__(self) -> int:
        return len(self._species)

    def child(self, a: Species, b: Species) -> Species:
        try:
            i = self._index[a]
            j = self._index[b]
        except KeyError as e:
            raise PairingLookupError(
                f"Species {e.args[0]} is not in the pairing table"
            ) from None
        return self._species[int(self._matrix[i, j])]

    def as_matrix(self) -> np.ndarray:
        """Child species indices, rows and columns in species order."""
        return self._matrix.copy()

    def rows(self) -> Iterator[Tuple[str, str, str]]:
        """Yield (parent_a, parent_b, child) name triples in species order."""
        for i, a in enumerate(self._species):
            for j, b in enumerate(self._species):
                yield (a.name, b.name, self._species[int(self._matrix[i, j])].name)
