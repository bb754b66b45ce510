from __future__ import annotations

"""Line tokenizer for the BRASÍNDICE TXT export.

The export quotes fields with ``"`` and escapes a literal quote as ``""``.
Commas outside quotes always separate fields, so a single scan with an
in-quotes flag is enough; the csv module's dialect heuristics are not used.
"""

__all__ = [
    "split_line",
]


def split_line(line: str) -> list[str]:
    """Split one line into raw field strings.

    No trimming and no type coercion happen here. There is always one more
    field than unquoted commas. An unterminated quote does not raise: the
    buffered text simply becomes the last field.

    >>> split_line('"a,b","c""d",e')
    ['a,b', 'c"d', 'e']
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    length = len(line)

    while i < length:
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < length and line[i + 1] == '"':
                current.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current))
    return fields
