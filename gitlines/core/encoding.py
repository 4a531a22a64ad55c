"""UTF-8 encoding constants and helpers for git-lines."""

import sys

# Encoding constants
ENCODING = "utf-8"
ENCODING_ERRORS = "replace"  # Console output: preserve data, mark corruption

# Git process boundary: undecodable bytes survive a decode/encode round trip
GIT_ENCODING_ERRORS = "surrogateescape"


def decode_git_output(data: bytes) -> str:
    """Decode raw git output so that every byte can be re-encoded unchanged."""
    return data.decode(ENCODING, GIT_ENCODING_ERRORS)


def encode_git_input(text: str) -> bytes:
    """Encode text produced from decode_git_output() back to the original bytes."""
    return text.encode(ENCODING, GIT_ENCODING_ERRORS)


def configure_stdio() -> None:
    """Reconfigure stdout/stderr to use UTF-8 with replace error handling.

    Should be called at application startup so that diff content with stray
    bytes never crashes the console.
    """
    for stream in (sys.stdout, sys.stderr):
        if hasattr(stream, "reconfigure"):
            stream.reconfigure(encoding=ENCODING, errors=ENCODING_ERRORS)
