"""Logging package for BreedArchitect."""

from breedarchitect.logger.base_logger import AlgorithmLogger
from breedarchitect.logger.table_logger import TableLogger
from breedarchitect.logger.search_logger import SearchLogger
from breedarchitect.logger.formatting import (
    format_set,
    format_entity,
    format_pairing,
    format_instructions,
)

# Unified singleton for search tracing, silent unless enabled by the caller
bt_logger = SearchLogger("BreedTree")
bt_logger.disabled = True

__all__ = [
    "AlgorithmLogger",
    "TableLogger",
    "SearchLogger",
    "bt_logger",
    "format_set",
    "format_entity",
    "format_pairing",
    "format_instructions",
]
