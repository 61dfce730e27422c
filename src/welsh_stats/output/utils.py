"""Shared helpers for table rendering."""

from collections.abc import Sequence


def format_value(value: float) -> str:
    """Format a numeric value with six decimal places."""
    return f"{value:.6f}"


def column_widths(*rows: Sequence[str]) -> list[int]:
    """Return, per column, the width of the widest cell across ``rows``."""
    return [max(len(cell) for cell in column) for column in zip(*rows)]


def align_row(cells: Sequence[str], widths: Sequence[int]) -> str:
    """Right-align each cell to its column width, separated by single spaces."""
    return " ".join(cell.rjust(width) for cell, width in zip(cells, widths))
