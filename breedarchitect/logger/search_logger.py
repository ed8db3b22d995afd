"""Logger with helpers for the pairing table and breeding tree search."""

import logging
from typing import List, Sequence, Tuple

from breedarchitect.logger.table_logger import TableLogger
from breedarchitect.logger.formatting import format_pairing


class SearchLogger(TableLogger):
    """
    Combined logger for the breeding tree calculator.

    Usage:
        bt_logger.setup_console_logging()
        calculator.calc_tree(...)
        bt_logger.write_html("search.html")
    """

    def __init__(self, name: str):
        TableLogger.__init__(self, name)

    def log_pairing_rows(
        self, rows: Sequence[Tuple[str, str, str]], title: str = "Pairing table"
    ) -> None:
        if self.disabled:
            return
        self.table(
            [list(row) for row in rows],
            headers=["Parent A", "Parent B", "Child"],
            title=title,
            tablefmt="simple",
        )

    def log_layers(self, layers: List[list], title: str = "Breeding layers") -> None:
        if self.disabled:
            return
        data = [
            [depth, format_pairing(pairing)]
            for depth, layer in enumerate(layers)
            for pairing in layer
        ]
        self.table(data, headers=["Layer", "Pairing"], title=title, tablefmt="simple")

    def is_tracing(self) -> bool:
        """True when per-node debug messages would actually be emitted."""
        return not self.disabled and self.logger.isEnabledFor(logging.DEBUG)
