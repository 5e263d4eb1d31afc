#!/usr/bin/env python3
"""simulate.py

Plays the solver against known answers and reports how fast the live set shrinks.
Optionally plots the median live-set size per turn with matplotlib.

Examples:
  nerdle-simulate classic.txt --limit 200 --seed 1
  nerdle-simulate micro.txt --sample-size 200 --plot shrink.png

Notes:
- Every game plays the suggested guess; the mask comes from compute_mask against the secret.
- Use --plot to require matplotlib (pip install 'nerdle-solver[plot]').
"""

from __future__ import annotations

import argparse
import math
import random
import statistics
import sys
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import tqdm

from .candidates import CandidateStore, load_candidates
from .errors import InputFormatError
from .estimator import DEFAULT_SAMPLE_SIZE
from .mask import compute_mask, solved_mask
from .session import Session, SessionState


@dataclass(frozen=True)
class GameResult:
    secret: str
    solved: bool
    guesses: Tuple[str, ...]
    # live-set size after each guess that didn't win (the universe size comes before these)
    remaining: Tuple[int, ...]
    # estimator's score for each guess it suggested (0.0 for a forced last option)
    information: Tuple[float, ...]

    @property
    def turns(self) -> int:
        return len(self.guesses)

    @property
    def first_guess(self) -> str:
        return self.guesses[0] if self.guesses else ""


def simulate_game(
    *,
    secret: str,
    store: CandidateStore,
    sample_size: int,
    rng: random.Random,
    max_turns: int,
    workers: int = 1,
) -> GameResult:
    session = Session(store, sample_size=sample_size, rng=rng, workers=workers, top_k=1)
    won = solved_mask(store.length)

    guesses: List[str] = []
    remaining: List[int] = []
    information: List[float] = []

    def result(solved: bool) -> GameResult:
        return GameResult(secret, solved, tuple(guesses), tuple(remaining), tuple(information))

    for _ in range(max_turns):
        if session.state is SessionState.SOLVED:
            # the last option is played as the forced guess
            guess, info = session.answer, 0.0
        else:
            est = session.suggest()
            guess, info = est.guess, est.information
        guesses.append(guess)
        information.append(info)

        mask = compute_mask(guess, secret)
        if mask == won:
            return result(True)
        if session.state is SessionState.SOLVED:
            # only option left and it's wrong: the secret wasn't in the universe
            return result(False)

        session.submit(guess, mask)
        remaining.append(len(session.candidates))
        if session.state is SessionState.EXHAUSTED:
            return result(False)

    return result(False)


# realised_bits is how many bits each filtered turn actually removed, log2(before / after)
def realised_bits(result: GameResult, universe: int) -> List[float]:
    sizes = [universe] + list(result.remaining)
    return [math.log2(before / after) for before, after in zip(sizes, sizes[1:]) if after > 0]


def median_remaining_by_turn(results: Sequence[GameResult], universe: int) -> List[float]:
    """Median live-set size before turn 1, 2, ... over the games still unsolved at that point."""
    medians = [float(universe)]
    depth = max((len(r.remaining) for r in results), default=0)
    for t in range(depth):
        sizes = [r.remaining[t] for r in results if len(r.remaining) > t]
        medians.append(statistics.median(sizes))
    return medians


def summarize(results: Sequence[GameResult], *, universe: int, sample_size: int) -> str:
    if not results:
        return "No results."

    solved = [r for r in results if r.solved]
    failed = [r for r in results if not r.solved]

    lines: List[str] = [
        f"Games: {len(results)} over {universe} equations, scoring up to {sample_size} guesses per turn",
        f"Solved: {len(solved)} ({len(solved) / len(results) * 100:.2f}%)",
    ]

    if solved:
        turns = [r.turns for r in solved]
        dist = Counter(turns)
        lines.append(f"Turns (solved): mean {statistics.mean(turns):.3f}, median {statistics.median(turns):.1f}, worst {max(turns)}")
        lines.append("Turn distribution: " + ", ".join(f"{t}:{dist[t]}" for t in sorted(dist)))

    medians = median_remaining_by_turn(results, universe)
    lines.append("Median options left after turn: " + ", ".join(f"{t}:{m:g}" for t, m in enumerate(medians[1:], start=1)))

    # estimated vs actual for the opening guess, where every game starts from the same live set
    openers = [r for r in results if r.remaining and r.remaining[0] > 0]
    if openers:
        est = statistics.mean(-r.information[0] for r in openers)
        got = statistics.mean(realised_bits(r, universe)[0] for r in openers)
        lines.append(f"Opening guess: estimated {est:.3f} bits, realised {got:.3f} bits on average")

    first = Counter(r.first_guess for r in results)
    top_guess, top_count = first.most_common(1)[0]
    lines.append(f"Most common opener: {top_guess} ({top_count} / {len(results)})")

    if failed:
        examples = ", ".join(f"{r.secret} ({r.remaining[-1] if r.remaining else universe} left)" for r in failed[:10])
        lines.append(f"Failed ({len(failed)}), up to 10: {examples}")

    return "\n".join(lines)


def plot_shrinkage(*, results: Sequence[GameResult], universe: int, out_path: str) -> None:
    # Import matplotlib only if plotting is requested.
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt  # noqa: E402

    medians = median_remaining_by_turn(results, universe)
    turns = list(range(len(medians)))

    fig, ax = plt.subplots(figsize=(8, 4.5))
    for r in results:
        ax.plot(turns[: len(r.remaining) + 1], [universe] + list(r.remaining), color="0.8", linewidth=0.6)
    ax.plot(turns, medians, marker="o", color="C0", label="median")
    ax.set_yscale("log")
    ax.set_xticks(turns)
    ax.set_title("Nerdle live-set size per turn")
    ax.set_xlabel("Guesses played")
    ax.set_ylabel("Options remaining")
    ax.legend(loc="upper right")
    fig.tight_layout()
    fig.savefig(out_path, dpi=150)
    plt.close(fig)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Play the Nerdle solver against known answers and report statistics.")
    ap.add_argument("candidates", type=str, help="Candidate equations, one per line.")
    ap.add_argument("--secrets", type=str, default=None,
                    help="Secrets to test, one per line (defaults to the candidate list itself).")
    ap.add_argument("--limit", type=int, default=0, help="Limit number of secrets (0 = no limit).")
    ap.add_argument("--shuffle", action="store_true", help="Shuffle secrets (with --seed) before applying --limit.")
    ap.add_argument("--max-turns", type=int, default=6, help="Max turns per game.")
    ap.add_argument("--sample-size", type=int, default=DEFAULT_SAMPLE_SIZE, help="Guesses scored per turn.")
    ap.add_argument("--seed", type=int, default=None, help="Seed for secret shuffling and guess sampling.")
    ap.add_argument("--workers", type=int, default=1, help="Worker processes for scoring guesses.")
    ap.add_argument("--no-progress", action="store_true", help="Disable progress bars.")
    ap.add_argument("--plot", type=str, default=None, help="Write the live-set shrinkage plot to this path.")
    args = ap.parse_args(argv)

    if args.sample_size < 1:
        ap.error("--sample-size must be at least 1")

    try:
        store = CandidateStore.load(args.candidates)
        secrets = load_candidates(args.secrets) if args.secrets else store.live()
    except InputFormatError as e:
        print(f"{e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"load: {e}", file=sys.stderr)
        return 2

    rng = random.Random(args.seed)
    if args.shuffle:
        rng.shuffle(secrets)
    if args.limit and args.limit > 0:
        secrets = secrets[: args.limit]

    universe = set(store.equations)
    unknown = [s for s in secrets if s not in universe]
    if unknown:
        print(f"Skipped {len(unknown)} secrets not in the candidate list.")
    secrets = [s for s in secrets if s in universe]

    games = tqdm.tqdm(secrets, desc="Simulating", unit="game") if not args.no_progress else secrets
    results = [
        simulate_game(
            secret=secret,
            store=store,
            sample_size=args.sample_size,
            rng=rng,
            max_turns=args.max_turns,
            workers=args.workers,
        )
        for secret in games
    ]

    print(summarize(results, universe=len(store), sample_size=args.sample_size))

    if args.plot and results:
        try:
            plot_shrinkage(results=results, universe=len(store), out_path=args.plot)
            print(f"Wrote plot: {args.plot}")
        except ModuleNotFoundError as e:
            print(f"Plot requested but missing dependency: {e}. Install matplotlib to use --plot.", file=sys.stderr)
            return 2

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
