"""
estimator.py

Picks the next guess by estimating how much each guess would tell us.

Scoring every remaining equation against every other one is quadratic in the
live set, and the classic Nerdle universe alone has ~17k equations (maxi has
millions), so only a random sample of guesses is scored. Each sampled guess is
still scored against the *whole* live set.

Sign convention: information is sum(p * log2(p)) over the mask buckets, which
is the negative Shannon entropy. It is never positive, and more negative means
the guess splits the live set more evenly (better). A guess that can't split
the set at all scores 0.
"""

from __future__ import annotations

import math
import multiprocessing as mp
import random
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import tqdm

from .errors import NoCandidatesRemaining
from .mask import Mask, compute_mask

LogFn = Callable[[str], None]

DEFAULT_SAMPLE_SIZE = 1000


# information_from_counts is sum(p * log2(p)) over the mask buckets
# https://en.wikipedia.org/wiki/Entropy_(information_theory)
# H(X) = - sum(p(x) * log2(p(x))), so this returns -H(X)
def information_from_counts(counts: Iterable[int], total: int) -> float:
    if total <= 0:
        return 0.0
    # fsum is exactly rounded, so bucket order can't change the result
    return math.fsum((c / total) * math.log2(c / total) for c in counts if c)


# mask_histogram buckets the live set by the mask `guess` would produce against each equation
def mask_histogram(guess: str, candidates: Iterable[str]) -> Dict[Mask, int]:
    buckets: Dict[Mask, int] = Counter()
    for truth in candidates:
        buckets[compute_mask(guess, truth)] += 1
    return buckets


def score_guess(guess: str, candidates: Sequence[str]) -> float:
    return information_from_counts(mask_histogram(guess, candidates).values(), total=len(candidates))


@dataclass(frozen=True)
class GuessEstimate:
    guess: str
    information: float
    # size of the live set each score was computed over
    evaluated_over: int
    # how many guesses were actually scored
    sampled: int
    # best sampled guesses, best first
    ranked: Tuple[Tuple[str, float], ...]
    # live set in load order; for display only
    preview: Tuple[str, ...]


# worker-side copy of the live set, set once per pool by _init_worker
_worker_candidates: Sequence[str] = ()


def _init_worker(candidates: Sequence[str]) -> None:
    global _worker_candidates
    _worker_candidates = candidates


def _score_in_worker(guess: str) -> float:
    return score_guess(guess, _worker_candidates)


def _score_serial(sample: List[str], candidates: Sequence[str], show_progress: bool) -> List[float]:
    iterator = tqdm.tqdm(sample, desc="Scoring guesses", unit="eq") if show_progress else sample
    return [score_guess(g, candidates) for g in iterator]


def _score_parallel(sample: List[str], candidates: Sequence[str], workers: int, show_progress: bool) -> List[float]:
    chunksize = max(1, len(sample) // (workers * 4))
    with mp.Pool(processes=workers, initializer=_init_worker, initargs=(tuple(candidates),)) as pool:
        # imap keeps sample order, so ties resolve exactly like the serial path
        results = pool.imap(_score_in_worker, sample, chunksize=chunksize)
        if show_progress:
            results = tqdm.tqdm(results, total=len(sample), desc="Scoring guesses", unit="eq")
        return list(results)


def best_guess(
    candidates: Sequence[str],
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    rng: Optional[random.Random] = None,
    *,
    top_k: int = 5,
    workers: int = 1,
    show_progress: bool = False,
    log_debug: Optional[LogFn] = None,
) -> GuessEstimate:
    """
    Score a random sample of at most `sample_size` guesses drawn from the live
    set and return the most informative one (most negative score).

    Ties go to whichever guess came first in the sample. Every sampled guess
    is itself a live candidate, so the winner is always a possible answer.
    """
    if not candidates:
        raise NoCandidatesRemaining()
    if sample_size < 1:
        raise ValueError(f"sample_size must be at least 1, got {sample_size}")

    n = len(candidates)
    preview = tuple(candidates)

    # nothing left to discriminate
    if n == 1:
        return GuessEstimate(
            guess=candidates[0],
            information=0.0,
            evaluated_over=1,
            sampled=1,
            ranked=((candidates[0], 0.0),),
            preview=preview,
        )

    if rng is None:
        rng = random.Random()

    if n <= sample_size:
        sample = list(candidates)
    else:
        sample = rng.sample(list(candidates), sample_size)

    if log_debug is not None:
        log_debug(f"estimator: scoring {len(sample)} sampled guesses against {n} candidates (workers={workers})")

    if workers > 1 and len(sample) > 1:
        scores = _score_parallel(sample, candidates, workers, show_progress)
    else:
        scores = _score_serial(sample, candidates, show_progress)

    scored = list(zip(sample, scores))
    # stable sort: equal scores keep sample order
    ranked = sorted(scored, key=lambda x: x[1])
    best, info = ranked[0]

    if log_debug is not None:
        log_debug(f"estimator: best {best} ({info:.4f}), worst sampled {ranked[-1][0]} ({ranked[-1][1]:.4f})")

    return GuessEstimate(
        guess=best,
        information=info,
        evaluated_over=n,
        sampled=len(sample),
        ranked=tuple(ranked[: max(1, top_k)]),
        preview=preview,
    )
