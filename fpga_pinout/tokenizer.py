"""
Quote-aware line tokenizer.

Vendor pin files are "CSV-ish": quoted fields may contain the delimiter,
quotes are occasionally left unterminated, and trailing delimiters are
common.  ``csv.reader`` rejects or reinterprets some of these lines, so
the split is done with a single explicit character scan.

The tokenizer is purely lexical -- it knows nothing about columns.
"""

from __future__ import annotations

_CANDIDATE_DELIMITERS = (",", "\t", ";")


def split_line(line: str, delimiter: str = ",") -> list[str]:
    """Split one line into trimmed fields.

    - A ``"`` toggles the inside-quotes state and is dropped.
    - The delimiter only splits while outside quotes.
    - A trailing delimiter yields a trailing empty field; a run of
      trailing delimiters yields a single one (exports pad rows to the
      widest column count, and readers treat missing fields as empty).
    - An unterminated quote never raises; the rest of the line becomes
      part of the current field.

    Example::

        >>> split_line('"SIG, A","1",,')
        ['SIG, A', '1', '']
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    fields.append("".join(current).strip())
    while len(fields) > 2 and fields[-1] == "" and fields[-2] == "":
        fields.pop()
    return fields


def is_blank_row(line: str, delimiter: str = ",") -> bool:
    """True for empty lines and lines made only of delimiters/whitespace."""
    return not line.replace(delimiter, "").strip()


def sniff_delimiter(line: str) -> str:
    """Pick the most frequent candidate delimiter; comma on ties or none."""
    best = ","
    best_count = line.count(",")
    for candidate in _CANDIDATE_DELIMITERS[1:]:
        count = line.count(candidate)
        if count > best_count:
            best, best_count = candidate, count
    return best
