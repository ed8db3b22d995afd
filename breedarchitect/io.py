"""
Tabular ingestion and JSON export.

The source tables are comma-separated with a header row. Columns are read by
position:

    species:  id, code, name, breed_value, index_order
    traits:   id, code, name
    overrides: _, parent_a, _, parent_b, _, child
"""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from breedarchitect.breeding.calculator import BreedCalculator
from breedarchitect.elements.entity import Species, Trait
from breedarchitect.search.reconstruction import BreedPairing

logger = logging.getLogger(__name__)


def read_table(source: str) -> pd.DataFrame:
    """Read a comma-separated table from a path or URL, all cells as strings."""
    frame = pd.read_csv(source, dtype=str, skip_blank_lines=True, keep_default_na=False)
    return frame.apply(lambda column: column.str.strip())


def parse_species(frame: pd.DataFrame) -> List[Species]:
    return [
        Species(
            name=row[2],
            breed_rank=int(row[3]),
            tie_order=int(row[4]),
            species_id=int(row[0]),
        )
        for row in frame.itertuples(index=False, name=None)
    ]


def parse_traits(frame: pd.DataFrame) -> List[Trait]:
    return [Trait(row[2]) for row in frame.itertuples(index=False, name=None)]


def parse_overrides(frame: pd.DataFrame) -> List[Tuple[str, str, str]]:
    return [
        (row[1], row[3], row[5]) for row in frame.itertuples(index=False, name=None)
    ]


def load_calculator(
    species_source: str,
    traits_source: str,
    overrides_source: Optional[str] = None,
) -> BreedCalculator:
    species = parse_species(read_table(species_source))
    traits = parse_traits(read_table(traits_source))
    overrides = (
        parse_overrides(read_table(overrides_source)) if overrides_source else []
    )
    logger.info(
        "Loaded %d species, %d traits, %d overrides",
        len(species),
        len(traits),
        len(overrides),
    )
    return BreedCalculator(traits, species, overrides)


def _node_to_dict(node) -> Dict[str, Any]:
    entity = node.entity
    return {
        "index": node.index,
        "species": entity.species.name,
        "sex": entity.sex.value if entity.sex is not None else None,
        "traits": sorted(t.name for t in entity.traits),
        "leaf": node.is_leaf,
    }


def layers_to_dict(layers: List[List[BreedPairing]]) -> List[List[Dict[str, Any]]]:
    """Serializable form of reconstructed layers, final cross first."""
    return [
        [
            {
                "father": _node_to_dict(p.father),
                "mother": _node_to_dict(p.mother),
                "child": _node_to_dict(p.child),
            }
            for p in layer
        ]
        for layer in layers
    ]


def write_json(layers: List[List[BreedPairing]], path: str):
    with open(path, mode="w") as f:
        json.dump(layers_to_dict(layers), f, indent=2)
