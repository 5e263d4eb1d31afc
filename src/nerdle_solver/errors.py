"""Exceptions raised by the solver.

Input problems (bad candidate file, malformed guess or mask) are
``InputFormatError`` subclasses and are recoverable: the CLI re-prompts or
rejects the load. ``LengthMismatch`` is an invariant violation and is never
caught.
"""

from __future__ import annotations


class NerdleError(Exception):
    """Base class for every error the solver raises on purpose."""


class InputFormatError(NerdleError, ValueError):
    """Data supplied from outside (file or human) doesn't have the expected shape."""


class EmptySource(InputFormatError):
    def __init__(self, source: str = "candidates"):
        super().__init__(f"load: no equations found in {source}")
        self.source = source


class InconsistentLength(InputFormatError):
    def __init__(self, line_no: int, entry: str, expected: int):
        super().__init__(
            f"load: line {line_no} has length {len(entry)} ({entry!r}), expected {expected}"
        )
        self.line_no = line_no
        self.entry = entry
        self.expected = expected


class UndecodableSource(InputFormatError):
    def __init__(self, source: str, line_no: int, cause: UnicodeDecodeError):
        super().__init__(f"load: line {line_no} of {source} is not valid UTF-8 ({cause.reason} at byte {cause.start})")
        self.source = source
        self.line_no = line_no


class MalformedGuess(InputFormatError):
    pass


class MalformedMask(InputFormatError):
    pass


class NoCandidatesRemaining(NerdleError):
    def __init__(self, msg: str = "No options remain; the feedback entered contradicts every candidate."):
        super().__init__(msg)


class SessionStateError(NerdleError, RuntimeError):
    pass


class LengthMismatch(AssertionError):
    def __init__(self, guess: str, truth: str):
        super().__init__(f"mask: length mismatch between {guess!r} ({len(guess)}) and {truth!r} ({len(truth)})")
        self.guess = guess
        self.truth = truth
