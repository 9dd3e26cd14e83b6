"""
Bordered text tables for list views.

Example output:
    +-----------+--------------+--------+
    | ID        | DISPLAY NAME | TYPE   |
    +-----------+--------------+--------+
    | support   | Support Bot  | SEARCH |
    | hr-portal | HR Portal    | CHAT   |
    +-----------+--------------+--------+
"""

from __future__ import annotations

ELLIPSIS = "..."


def truncate(value: str, width: int) -> str:
    """Shorten ``value`` to ``width`` characters, ending in ``...`` when cut."""
    if width <= 0 or len(value) <= width:
        return value
    if width <= len(ELLIPSIS):
        return value[:width]
    return value[: width - len(ELLIPSIS)] + ELLIPSIS


class TableRenderer:
    """Render headers and rows with ``+``/``|`` borders."""

    def __init__(
        self,
        alignments: list[str] | None = None,
        max_widths: list[int] | None = None,
    ) -> None:
        """
        Args:
            alignments: Per-column alignment, ``l``, ``r`` or ``c`` (default ``l``)
            max_widths: Per-column width cap; longer cells are truncated.
                Zero or a missing entry means no cap.
        """
        self._alignments = alignments or []
        self._max_widths = max_widths or []

    def _cap(self, column: int) -> int:
        return self._max_widths[column] if column < len(self._max_widths) else 0

    def _align(self, cell: str, width: int, column: int) -> str:
        align = self._alignments[column] if column < len(self._alignments) else "l"
        if align == "r":
            return cell.rjust(width)
        if align == "c":
            return cell.center(width)
        return cell.ljust(width)

    def render(self, headers: list[str], rows: list[list[str]]) -> str:
        if not headers:
            return ""

        cells = [
            [truncate(str(cell), self._cap(i)) for i, cell in enumerate(row[: len(headers)])]
            for row in rows
        ]
        for row in cells:
            row.extend([""] * (len(headers) - len(row)))

        widths = [
            max([len(h)] + [len(row[i]) for row in cells]) for i, h in enumerate(headers)
        ]
        rule = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

        def line(values: list[str], aligned: bool) -> str:
            parts = [
                self._align(v, widths[i], i) if aligned else v.ljust(widths[i])
                for i, v in enumerate(values)
            ]
            return "| " + " | ".join(parts) + " |"

        lines = [rule, line(headers, aligned=False), rule]
        lines.extend(line(row, aligned=True) for row in cells)
        lines.append(rule)
        return "\n".join(lines)
