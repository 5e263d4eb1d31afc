#!/usr/bin/env python3
"""
session.py

A Nerdle helper that suggests guesses by estimated information gain.
You play Nerdle elsewhere; after each guess you type the guess you played and
the colours the game gave it.

Mask format:
- One character per tile: G (green), P (purple), B (black)
  or digits 2, 1, 0. Example: "GBPPBGGB" or "20110220"

Guess format:
- The equation as played, e.g. "42+9-35=16". Type s for ² and c for ³.

Usage:
  nerdle-solver classic.txt
  nerdle-solver maxi.txt --sample-size 500 --workers 4 --seed 7
"""

from __future__ import annotations

import argparse
import enum
import random
import sys
import time
from typing import Callable, List, Optional, Tuple

from .candidates import CandidateStore, filter_candidates
from .errors import InputFormatError, MalformedGuess, MalformedMask, SessionStateError
from .estimator import DEFAULT_SAMPLE_SIZE, GuessEstimate, best_guess
from .mask import Mask, format_mask, mask_glyphs, normalize_guess, parse_mask, solved_mask

LogFn = Callable[[str], None]

QUIT = "quit"


class SessionState(enum.Enum):
    AWAITING_GUESS = "awaiting_guess"
    AWAITING_MASK = "awaiting_mask"
    FILTERING = "filtering"
    SOLVED = "solved"
    EXHAUSTED = "exhausted"


class Session:
    """
    One interactive run: the live candidate set plus every (guess, mask) applied to it.

    suggest() moves AWAITING_GUESS -> AWAITING_MASK, submit() runs the filter
    and lands in AWAITING_GUESS, SOLVED (one left) or EXHAUSTED (none left).
    """

    def __init__(
        self,
        store: CandidateStore,
        *,
        sample_size: int = DEFAULT_SAMPLE_SIZE,
        rng: Optional[random.Random] = None,
        workers: int = 1,
        top_k: int = 5,
        show_progress: bool = False,
        log: Optional[LogFn] = None,
        log_debug: Optional[LogFn] = None,
    ):
        self.store = store
        self.candidates: List[str] = store.live()
        self.history: List[Tuple[str, Mask]] = []
        self.sample_size = sample_size
        self.rng = rng if rng is not None else random.Random()
        self.workers = workers
        self.top_k = top_k
        self.show_progress = show_progress
        self.last_estimate: Optional[GuessEstimate] = None
        self._log = log
        self._log_debug = log_debug
        self.state = self._state_for_size(len(self.candidates))

    @property
    def length(self) -> int:
        return self.store.length

    @property
    def answer(self) -> Optional[str]:
        return self.candidates[0] if self.state is SessionState.SOLVED else None

    def _state_for_size(self, n: int) -> SessionState:
        if n == 0:
            return SessionState.EXHAUSTED
        if n == 1:
            return SessionState.SOLVED
        return SessionState.AWAITING_GUESS

    def _expect(self, *states: SessionState) -> None:
        if self.state not in states:
            wanted = " or ".join(s.value for s in states)
            raise SessionStateError(f"session is {self.state.value}, expected {wanted}")

    def suggest(self) -> GuessEstimate:
        self._expect(SessionState.AWAITING_GUESS)
        self.last_estimate = best_guess(
            self.candidates,
            self.sample_size,
            self.rng,
            top_k=self.top_k,
            workers=self.workers,
            show_progress=self.show_progress,
            log_debug=self._log_debug,
        )
        self.state = SessionState.AWAITING_MASK
        return self.last_estimate

    def submit(self, guess: str, mask: Mask) -> SessionState:
        """Apply the guess actually played and the mask the game showed for it."""
        self._expect(SessionState.AWAITING_MASK)
        # checked here so compute_mask never sees a length it can't handle
        if len(guess) != self.length:
            raise MalformedGuess(f"guess: {guess!r} has {len(guess)} characters, expected {self.length}")
        if len(mask) != self.length:
            raise MalformedMask(f"mask: got {len(mask)} states, expected {self.length}")

        self.state = SessionState.FILTERING
        before = len(self.candidates)
        self.candidates = filter_candidates(self.candidates, guess, mask)
        self.history.append((guess, tuple(mask)))
        if self._log is not None:
            self._log(f"filter: {guess} narrowed candidates {before} -> {len(self.candidates)}")

        self.state = self._state_for_size(len(self.candidates))
        return self.state


# prompt_until_valid re-asks until parse() accepts the answer; returns None on quit/EOF
def _prompt_until_valid(prompt: str, parse: Callable[[str], object]):
    while True:
        try:
            raw = input(prompt)
        except EOFError:
            print("")
            return None
        if raw.strip().lower() == QUIT:
            return None
        try:
            return parse(raw)
        except InputFormatError as e:
            print(f"{e}\n")


def _print_estimate(est: GuessEstimate, preview_limit: int) -> None:
    print(
        f"Best guess: {est.guess}  |  information {est.information:.4f} bits "
        f"(over {est.evaluated_over} candidates, {est.sampled} guesses sampled)"
    )
    if len(est.ranked) > 1:
        print("Top sampled guesses (guess | information):")
        for g, h in est.ranked:
            print(f"  {g}  |  {h:.4f}")

    print("")
    for eq in est.preview[:preview_limit]:
        print(f"- {eq}")
    if len(est.preview) > preview_limit:
        print("- ...")
    print("")


def cli(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Nerdle information-gain solver (interactive CLI).")
    ap.add_argument("candidates", type=str, help="Path to the candidate equations, one per line.")
    ap.add_argument("--sample-size", type=int, default=DEFAULT_SAMPLE_SIZE,
                    help="How many remaining equations to score as possible guesses each turn.")
    ap.add_argument("--seed", type=int, default=None, help="Seed the guess sampling for repeatable suggestions.")
    ap.add_argument("--workers", type=int, default=1, help="Worker processes for scoring guesses.")
    ap.add_argument("--top", type=int, default=5, help="How many sampled guesses to list each turn.")
    ap.add_argument("--preview", type=int, default=25, help="How many remaining equations to list each turn.")
    ap.add_argument("--no-progress", action="store_true", help="Disable progress bars.")
    ap.add_argument("--verbose", action="store_true", help="Print filtering details.")
    ap.add_argument("--debug", action="store_true", help="Very verbose logs (sampling, scoring).")
    args = ap.parse_args(argv)

    if args.sample_size < 1:
        ap.error("--sample-size must be at least 1")
    if args.workers < 1:
        ap.error("--workers must be at least 1")
    if args.preview < 0:
        ap.error("--preview must be 0 or more")
    if args.top < 1:
        ap.error("--top must be at least 1")

    verbose = bool(args.verbose or args.debug)
    debug = bool(args.debug)

    start_t = time.time()

    def log(msg: str) -> None:
        if not verbose:
            return
        dt = time.time() - start_t
        print(f"[{dt:7.2f}s] {msg}")

    def log_debug(msg: str) -> None:
        if not debug:
            return
        dt = time.time() - start_t
        print(f"[{dt:7.2f}s] DEBUG {msg}")

    print(f"Reading options from {args.candidates}")
    try:
        store = CandidateStore.load(args.candidates, log_debug=log_debug)
    except InputFormatError as e:
        print(f"{e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"load: can't read {args.candidates}: {e}", file=sys.stderr)
        return 2

    session = Session(
        store,
        sample_size=args.sample_size,
        rng=random.Random(args.seed),
        workers=args.workers,
        top_k=args.top,
        show_progress=not args.no_progress,
        log=log,
        log_debug=log_debug,
    )
    log(f"solver: loaded {len(store)} equations of length {store.length}, seed={args.seed}")

    print(f"Loaded {len(store)} options")
    print("\n=== Nerdle Solver ===")
    print(f"Guesses are scored on a random sample of up to {args.sample_size} equations per turn,")
    print("so suggestions are good but not guaranteed optimal.")
    print("Mask input: G/2 green, P/1 purple, B/0 black. Type 'quit' to exit.\n")

    turn = 1
    while True:
        if session.state is SessionState.SOLVED:
            print(f"There's only one option left, the answer is {session.answer}\n")
            return 0

        print(f"Turn {turn} | Remaining options: {len(session.candidates)}")
        est = session.suggest()
        _print_estimate(est, args.preview)

        guess = _prompt_until_valid(
            f"Enter the guess you played (Enter for {est.guess}; s for ², c for ³): ",
            lambda s: est.guess if s.strip() == "" else normalize_guess(s, store.length),
        )
        if guess is None:
            return 0
        mask = _prompt_until_valid(
            "Enter the mask (G or 2 for green; P or 1 for purple; B or 0 for black): ",
            lambda s: parse_mask(s, store.length),
        )
        if mask is None:
            return 0
        print(f"{guess}  {format_mask(mask)}  {mask_glyphs(mask)}")

        if mask == solved_mask(store.length):
            print(f"Solved in {turn} turns.\n")
            return 0

        state = session.submit(guess, mask)
        if state is SessionState.EXHAUSTED:
            print("No options remain. The feedback entered contradicts every candidate;", file=sys.stderr)
            print("most likely a guess or mask was mistyped. Restart to try again.", file=sys.stderr)
            return 1

        print(f"{len(session.candidates)} options remaining\n")
        turn += 1


def main() -> None:
    raise SystemExit(cli())


if __name__ == "__main__":
    main()
