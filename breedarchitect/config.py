from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PriorityMode(Enum):
    TREE_SIZE = "tree_size"
    DEPTH = "depth"


@dataclass
class SearchConfig:
    """Configuration for a single breeding tree search."""

    priority: PriorityMode = PriorityMode.TREE_SIZE
    max_settled_nodes: Optional[int] = None
    logger_name: str = "breedarchitect.search"


@dataclass
class TableConfig:
    """Configuration for building the pairing table."""

    exclude_override_results: bool = True
