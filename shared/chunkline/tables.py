"""
Pipe-table conversion.

Chat clients render markdown tables as raw pipes, so tables are rewritten
as bulleted key/value blocks:

    | Name | Value |          **Name | Value:**
    |------|-------|   ->     • **Name**: X
    | X    | 1     |            *Value*: 1

A row whose cell count differs from the current header ends the table.
Such a row starts a new table when it has at least two cells or is
followed by a separator row; otherwise it is kept as plain text.
"""

from .safety import fail_safe


SEPARATOR_CHARS = frozenset("|-: \t")


def _is_row(line: str) -> bool:
    stripped = line.strip()
    return len(stripped) >= 2 and stripped.startswith("|") and stripped.endswith("|")


def _is_separator(line: str) -> bool:
    return _is_row(line) and "-" in line and set(line.strip()) <= SEPARATOR_CHARS


def _cells(line: str) -> list[str]:
    return [cell.strip() for cell in line.strip()[1:-1].split("|")]


def _column_name(header: list[str], index: int) -> str:
    return header[index] or f"Column {index + 1}"


def render_header(header: list[str]) -> str:
    return f"**{' | '.join(header)}:**"


def render_row(header: list[str], cells: list[str]) -> list[str]:
    """Render one data row as a bullet plus indented key/value lines."""
    lines = [f"• **{_column_name(header, 0)}**: {cells[0]}".rstrip()]
    for index in range(1, len(cells)):
        if cells[index]:
            lines.append(f"  *{_column_name(header, index)}*: {cells[index]}")
    return lines


@fail_safe("table formatting")
def format_tables_for_discord(text):
    """Convert pipe-delimited tables into bulleted key/value blocks.

    Separator rows inside a table are dropped. Text without tables is
    returned unchanged; non-string input is returned as-is.

    Args:
        text: Message text, possibly containing markdown tables

    Returns:
        Text with every table rewritten
    """
    if not isinstance(text, str) or "|" not in text:
        return text

    lines = text.split("\n")
    output: list[str] = []
    header: list[str] | None = None
    changed = False

    for index, line in enumerate(lines):
        if not _is_row(line):
            header = None
            output.append(line)
            continue

        if _is_separator(line):
            if header is not None:
                changed = True
            else:
                output.append(line)
            continue

        cells = _cells(line)
        next_is_separator = index + 1 < len(lines) and _is_separator(lines[index + 1])

        if header is not None and len(cells) == len(header) and not next_is_separator:
            output.extend(render_row(header, cells))
            changed = True
        elif len(cells) >= 2 or next_is_separator:
            header = cells
            output.append(render_header(cells))
            changed = True
        else:
            header = None
            output.append(line)

    return "\n".join(output) if changed else text
