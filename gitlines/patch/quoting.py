"""Git C-style path quoting.

git writes a path in double quotes, with backslash escapes, whenever it
contains control characters, a quote, a backslash or (with the default
core.quotePath) bytes outside ASCII. Header paths are unquoted on the way in
and quoted again when a patch is written.
"""

from gitlines.core.encoding import decode_git_output, encode_git_input

_ESCAPES = {
    "a": 0x07,
    "b": 0x08,
    "t": 0x09,
    "n": 0x0A,
    "v": 0x0B,
    "f": 0x0C,
    "r": 0x0D,
    '"': 0x22,
    "\\": 0x5C,
}
_REVERSE_ESCAPES = {value: key for key, value in _ESCAPES.items()}


def _needs_quoting(byte: int) -> bool:
    return byte < 0x20 or byte >= 0x7F or byte in (0x22, 0x5C)


def unquote_path(text: str) -> str:
    """Undo git's C-style quoting; unquoted text is returned unchanged.

    >>> unquote_path('"caf\\\\303\\\\251.txt"')
    'café.txt'
    """
    if len(text) < 2 or not (text.startswith('"') and text.endswith('"')):
        return text

    body = text[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        char = body[i]
        if char != "\\" or i + 1 >= len(body):
            out += encode_git_input(char)
            i += 1
            continue
        nxt = body[i + 1]
        if nxt in _ESCAPES:
            out.append(_ESCAPES[nxt])
            i += 2
        elif body[i + 1:i + 4].isdigit() and len(body[i + 1:i + 4]) == 3:
            out.append(int(body[i + 1:i + 4], 8) & 0xFF)
            i += 4
        else:
            out += encode_git_input(char)
            i += 1
    return decode_git_output(bytes(out))


def quote_path(path: str) -> str:
    """Quote a path the way git does, or return it unchanged if no quoting is needed."""
    raw = encode_git_input(path)
    if not any(_needs_quoting(byte) for byte in raw):
        return path

    parts = ['"']
    for byte in raw:
        if byte in _REVERSE_ESCAPES:
            parts.append("\\" + _REVERSE_ESCAPES[byte])
        elif _needs_quoting(byte):
            parts.append(f"\\{byte:03o}")
        else:
            parts.append(chr(byte))
    parts.append('"')
    return "".join(parts)


def prefixed(prefix: str, path: str) -> str:
    """Join a diff prefix ('a/' or 'b/') and a path, quoting the result as a whole."""
    return quote_path(prefix + path)
