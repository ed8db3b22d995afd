"""Table display functionality for logs."""

import html
from typing import Any, List, Optional
from tabulate import tabulate
from breedarchitect.logger.base_logger import AlgorithmLogger


class TableLogger(AlgorithmLogger):
    """Extension of AlgorithmLogger with table support."""

    def table(
        self,
        data: List[List[Any]],
        headers: Optional[List[str]] = None,
        title: Optional[str] = None,
        tablefmt: str = "grid",
    ) -> None:
        """Display data as a formatted table."""
        if self.disabled:
            return

        if headers is None:
            headers = []

        if title:
            self.logger.info(f"\n{title}:")
            self._html_content.append(f"<h4>{html.escape(title)}</h4>")

        ascii_table = tabulate(
            data,
            headers=headers,
            tablefmt=tablefmt,
            showindex=False,
        )
        self.logger.info(ascii_table)
        self._html_content.append(
            tabulate(data, headers=headers, tablefmt="html", showindex=False)
        )
