from __future__ import annotations

from typing import Literal

ErrorKind = Literal["IllegalMove", "UnknownCardType", "DeckExhausted", "InvalidConfig"]


class EngineError(RuntimeError):
    kind: ErrorKind
    fatal = True


class IllegalMove(EngineError):
    """The submitted card cannot be played now. The caller may resubmit."""

    kind: ErrorKind = "IllegalMove"
    fatal = False


class UnknownCardType(EngineError):
    kind: ErrorKind = "UnknownCardType"

    def __init__(self, tag: str) -> None:
        super().__init__(f"Unknown card type: {tag!r}")
        self.tag = tag


class DeckExhausted(EngineError):
    kind: ErrorKind = "DeckExhausted"


class InvalidConfig(EngineError, ValueError):
    kind: ErrorKind = "InvalidConfig"
