"""Text table rendering for schema listings."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Listing:
    """Rows of schema names with a deterministic table rendering."""

    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...] = ()

    def __post_init__(self) -> None:
        for row in self.rows:
            if len(row) != len(self.headers):
                raise ValueError(
                    f"Row {row!r} has {len(row)} columns, expected {len(self.headers)}"
                )

    def __len__(self) -> int:
        return len(self.rows)

    def __str__(self) -> str:
        widths = [len(h) for h in self.headers]
        for row in self.rows:
            for i, cell in enumerate(row):
                widths[i] = max(widths[i], len(cell))

        border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

        def render_row(cells: tuple[str, ...]) -> str:
            padded = (f" {cell.ljust(widths[i])} " for i, cell in enumerate(cells))
            return "|" + "|".join(padded) + "|"

        lines = [border, render_row(tuple(h.upper() for h in self.headers)), border]
        if self.rows:
            lines.extend(render_row(row) for row in self.rows)
            lines.append(border)
        return "\n".join(lines)
