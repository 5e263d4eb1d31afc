"""
candidates.py

Loading the universe of valid equations and narrowing it down with feedback.

The candidate file is produced by an external generator: one equation per
line, every line the same length, e.g.

  1+2*3=7
  1+2*4=9
  ...
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple, Union

from .errors import EmptySource, InconsistentLength, UndecodableSource
from .mask import Mask, compute_mask

LogFn = Callable[[str], None]

Source = Union[str, os.PathLike, Iterable[str]]


# read_candidate_lines yields (line number, equation) from a path or any iterable of lines
def _read_candidate_lines(source: Source) -> Iterable[Tuple[int, str]]:
    if isinstance(source, (str, os.PathLike)):
        # decoded line by line so a bad byte can be reported with its line number
        with open(source, "rb") as f:
            for line_no, raw in enumerate(f, start=1):
                try:
                    line = raw.decode("utf-8")
                except UnicodeDecodeError as e:
                    raise UndecodableSource(os.fspath(source), line_no, e) from None
                yield line_no, line.strip()
    else:
        for line_no, line in enumerate(source, start=1):
            yield line_no, line.strip()


def load_candidates(source: Source, *, log_debug: Optional[LogFn] = None) -> List[str]:
    """
    Load equations in file order. Blank lines are skipped and duplicates are
    dropped (first occurrence wins).

    Raises EmptySource if nothing was read and InconsistentLength on the first
    line whose length differs from the first equation's.
    """
    name = os.fspath(source) if isinstance(source, (str, os.PathLike)) else "candidate list"
    out: List[str] = []
    seen = set()
    length: Optional[int] = None
    dupes = 0

    for line_no, eq in _read_candidate_lines(source):
        if not eq:
            continue
        if length is None:
            length = len(eq)
        elif len(eq) != length:
            raise InconsistentLength(line_no, eq, length)
        if eq in seen:
            dupes += 1
            continue
        seen.add(eq)
        out.append(eq)

    if not out:
        raise EmptySource(name)
    if dupes and log_debug is not None:
        log_debug(f"load: skipped {dupes} duplicate equations in {name}")
    return out


# filter candidates based on guess and the mask observed in the real game
def filter_candidates(candidates: Iterable[str], guess: str, mask: Mask) -> List[str]:
    """Keep the candidates that would have produced exactly `mask` had they been the answer."""
    mask = tuple(mask)
    return [c for c in candidates if compute_mask(guess, c) == mask]


@dataclass(frozen=True)
class CandidateStore:
    """The full, read-only universe of equations for one run."""

    equations: Tuple[str, ...]
    length: int

    @classmethod
    def load(cls, source: Source, *, log_debug: Optional[LogFn] = None) -> "CandidateStore":
        equations = load_candidates(source, log_debug=log_debug)
        return cls(equations=tuple(equations), length=len(equations[0]))

    def __len__(self) -> int:
        return len(self.equations)

    def live(self) -> List[str]:
        # fresh list, so a session can shrink it without touching the universe
        return list(self.equations)
