class DecodeError(ValueError):
    kind: str = "DecodeError"

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(f"{message} at offset {offset}")
        self.offset = offset


class UnknownMarkerError(DecodeError):
    kind = "UnknownMarker"

    def __init__(self, marker: int | None, offset: int) -> None:
        if marker is None:
            message = "Expected a type marker, buffer is empty"
        else:
            message = f"Unknown type marker {bytes([marker])!r}"
        super().__init__(message, offset)
        self.marker = marker


class MissingTerminatorError(DecodeError):
    kind = "MissingTerminator"


class InvalidIntegerLiteralError(DecodeError):
    kind = "InvalidIntegerLiteral"

    def __init__(self, literal: bytes, offset: int) -> None:
        super().__init__(f"Invalid integer literal {literal!r}", offset)
        self.literal = literal


class TruncatedPayloadError(DecodeError):
    kind = "TruncatedPayload"

    def __init__(
        self, expected: int, available: int, offset: int, unit: str = "bytes"
    ) -> None:
        super().__init__(
            f"Payload declares {expected} {unit} but only {available} remain", offset
        )
        self.expected = expected
        self.available = available


class NestingTooDeepError(DecodeError):
    kind = "NestingTooDeep"

    def __init__(self, max_depth: int, offset: int) -> None:
        super().__init__(f"Array nesting exceeds maximum depth {max_depth}", offset)
        self.max_depth = max_depth
