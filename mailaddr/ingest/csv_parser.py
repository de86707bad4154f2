"""Reader for header-export CSVs that the csv module cannot handle.

Exports of Date/From/To headers put every recipient of the To header into
its own CSV column, and long recipient lists wrap onto lines of their own.
Only the Date and From columns are CSV fields in any useful sense, the rest
of a line is the raw To header value.
"""

import re
from pathlib import Path
from typing import Iterator

# A data line starts with a date like "11/30/2010 13:27" or "Mon, 2 Jan 2006"
_DATE_START_RE = re.compile(
    r'^"?(?:\d{1,2}/\d{1,2}/\d{4}\s+\d{1,2}:\d{2}|(?:[A-Za-z]{3},\s+)?\d{1,2}\s+[A-Za-z]{3}\s+\d{4})'
)

_LEADING_FIELDS = ("date", "from_raw")


def _split_leading(line: str, count: int) -> tuple[list[str], str]:
    """Split off `count` quote-aware CSV fields, return them and the rest."""
    fields = []
    buf = []
    quoted = False
    pos = 0
    while pos < len(line) and len(fields) < count:
        ch = line[pos]
        pos += 1
        if ch == '"':
            if quoted and line.startswith('"', pos):
                buf.append('"')
                pos += 1
            else:
                quoted = not quoted
        elif ch == "," and not quoted:
            fields.append("".join(buf).strip())
            buf = []
        else:
            buf.append(ch)

    if len(fields) < count:
        fields.append("".join(buf).strip())
        fields.extend([""] * (count - len(fields)))
        return fields, ""
    return fields, line[pos:]


def _parse_csv_fields(line: str) -> list[str]:
    """Return [date, from, to_blob] for one logical line.

    Empty trailing columns are removed from the To blob.
    """
    fields, rest = _split_leading(line, len(_LEADING_FIELDS))
    return fields + [rest.strip().rstrip(",").strip()]


def iter_raw_lines(csv_path: Path) -> Iterator[str]:
    """Yield logical lines, each wrapped recipient line joined to its message.

    The header row is skipped, and so is anything before the first line
    that starts with a date.
    """
    with open(csv_path, "r", encoding="utf-8", errors="replace") as f:
        if not f.readline():
            return

        pending = None
        for raw_line in f:
            raw_line = raw_line.rstrip("\r\n")
            if not raw_line.strip():
                continue
            if _DATE_START_RE.match(raw_line):
                if pending is not None:
                    yield pending
                pending = raw_line
            elif pending is not None:
                pending = f"{pending} {raw_line.strip()}"

        if pending is not None:
            yield pending


def parse_csv(csv_path: Path) -> Iterator[dict]:
    """Yield one dict per message with keys date, from_raw and to_raw."""
    for line in iter_raw_lines(csv_path):
        date, from_raw, to_raw = _parse_csv_fields(line)
        yield {"date": date, "from_raw": from_raw, "to_raw": to_raw}
