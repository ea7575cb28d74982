"""JSON array writer for query results."""

import json
import sys
from typing import Any, Iterable, TextIO

COMPACT_SEPARATORS = (",", ":")


def dumps(records: Iterable[Any], pretty: bool = False) -> str:
    """Serialize records as one JSON array.

    Args:
        records: JSON-compatible values (documents or projected records)
        pretty: Indent with two spaces instead of compact output

    Notes:
        - Compact mode has no insignificant whitespace
        - Non-ASCII characters are written as-is
    """
    records_list = list(records)
    if pretty:
        return json.dumps(records_list, indent=2, ensure_ascii=False)
    return json.dumps(
        records_list, separators=COMPACT_SEPARATORS, ensure_ascii=False
    )


def write_json(
    records: Iterable[Any],
    pretty: bool = False,
    output: TextIO | None = None,
) -> None:
    """Write records as a JSON array followed by a newline."""
    output = output or sys.stdout
    output.write(dumps(records, pretty=pretty))
    output.write("\n")  # Add trailing newline
