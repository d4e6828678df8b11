"""
dfre: Decode errors.

Every failure raised while decoding derives from ReadError:
  - TruncatedError: the stream ended before the layout did
  - SignatureError: the magic bytes do not match, input is another format
  - DecodingError:  a structural invariant was violated
"""


class ReadError(Exception):
    """Base class for all decode failures."""


class TruncatedError(ReadError, EOFError):
    """Stream ended in the middle of a record."""

    def __init__(self, wanted: int, got: int, offset=None):
        self.wanted = wanted
        self.got = got
        self.offset = offset
        where = f" at offset 0x{offset:X}" if offset is not None else ""
        super().__init__(f"truncated read{where}: wanted {wanted} bytes, got {got}")


class SignatureError(ReadError, ValueError):
    """Magic bytes mismatch."""

    def __init__(self, expected: bytes, actual: bytes):
        self.expected = expected
        self.actual = actual
        super().__init__(f"bad signature: expected {expected!r}, got {actual!r}")


class DecodingError(ReadError, ValueError):
    """Input has the right signature but violates the format."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class LevelParseError(DecodingError):
    """Level text failed to parse. Reports the failing line."""

    def __init__(self, reason: str, line_number: int, line: str):
        self.line_number = line_number
        self.line = line
        super().__init__(f"line {line_number}: {reason}: {line.strip()!r}")
        self.reason = reason
