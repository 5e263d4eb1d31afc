"""Nerdle solver package."""

from .candidates import CandidateStore, filter_candidates, load_candidates
from .errors import (
    EmptySource,
    InconsistentLength,
    InputFormatError,
    LengthMismatch,
    MalformedGuess,
    MalformedMask,
    NerdleError,
    NoCandidatesRemaining,
    SessionStateError,
    UndecodableSource,
)
from .estimator import GuessEstimate, best_guess, information_from_counts, score_guess
from .mask import Mask, MaskState, compute_mask, normalize_guess, parse_mask
from .session import Session, SessionState

__all__ = [
    "CandidateStore",
    "EmptySource",
    "GuessEstimate",
    "InconsistentLength",
    "InputFormatError",
    "LengthMismatch",
    "MalformedGuess",
    "MalformedMask",
    "Mask",
    "MaskState",
    "NerdleError",
    "NoCandidatesRemaining",
    "Session",
    "SessionState",
    "SessionStateError",
    "UndecodableSource",
    "best_guess",
    "compute_mask",
    "filter_candidates",
    "information_from_counts",
    "load_candidates",
    "normalize_guess",
    "parse_mask",
    "score_guess",
]
