"""Round and bid derivation - pure functions of (elapsed time, settings)."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class RoundInfo:
    number: int
    start_fraction: float
    end_fraction: float


@dataclass(frozen=True)
class BidPair:
    small_bid: int
    large_bid: int


@dataclass(frozen=True)
class RoundState:
    round: int
    progress: float
    bids: BidPair


def _clamp(value, low, high):
    return max(low, min(high, value))

# Length of every round in whole seconds. The leftover seconds (when the match doesn't split evenly) all land in the
# last round.
def time_per_round(total_seconds, rounds):
    return math.floor(total_seconds / rounds)

# Fraction of the whole match at which round `number` ends. Round 0 "ends" at the start of the match.
def round_end_fraction(number, total_seconds, rounds):
    if total_seconds <= 0:
        return 0.0
    return time_per_round(total_seconds, rounds) * number / total_seconds

# Full partition of the match, one RoundInfo per round. Only needed for display, the tick path uses the closed forms.
def rounds_info(total_seconds, rounds):
    return [
        RoundInfo(
            number=n,
            start_fraction=round_end_fraction(n - 1, total_seconds, rounds),
            end_fraction=round_end_fraction(n, total_seconds, rounds),
        )
        for n in range(1, rounds + 1)
    ]

# The active round is the first round whose end lies strictly after `elapsed_seconds`, so a match sitting exactly on a
# boundary is already in the next round. Before the first tick that's round 1, and past the final boundary the last
# round stays active. With more rounds than seconds no boundary is ever ahead, and the match stays in round 1.
def current_round(elapsed_seconds, total_seconds, rounds):
    per_round = time_per_round(total_seconds, rounds)
    if per_round <= 0:
        return 1
    return _clamp(math.floor(elapsed_seconds / per_round) + 1, 1, rounds)

# How far through round `number` we are, in [0, 1]. A round with zero length counts as complete.
def round_progress(elapsed_seconds, total_seconds, rounds, number=None):
    if total_seconds <= 0:
        return 0.0
    if number is None:
        number = current_round(elapsed_seconds, total_seconds, rounds)
    start = round_end_fraction(number - 1, total_seconds, rounds)
    end = round_end_fraction(number, total_seconds, rounds)
    if end <= start:
        return 1.0
    elapsed_fraction = elapsed_seconds / total_seconds
    return _clamp((elapsed_fraction - start) / (end - start), 0.0, 1.0)

# Bids saturate here instead of overflowing. Past this the large bid is no longer an exact multiple of the small one.
MAX_BID = 10 ** 15

# Small bid grows linearly with the round on top of starting_bid ** round_exponent, rounded up to whole chips. Large
# bid is the multiple of that, floored so it never implies a fractional chip.
def bids_for_round(number, settings):
    chip = settings.chip_denomination
    try:
        raw = settings.starting_bid ** settings.round_exponent * number
    except OverflowError:
        raw = MAX_BID
    if not raw <= MAX_BID:
        raw = MAX_BID
    small_bid = math.ceil(raw / chip) * chip
    large = small_bid * settings.bid_multiplier
    large_bid = math.floor(large) if large <= MAX_BID else MAX_BID
    return BidPair(small_bid=small_bid, large_bid=large_bid)

def calculate(elapsed_seconds, settings):
    total_seconds = settings.total_seconds
    number = current_round(elapsed_seconds, total_seconds, settings.rounds)
    return RoundState(
        round=number,
        progress=round_progress(elapsed_seconds, total_seconds, settings.rounds, number),
        bids=bids_for_round(number, settings),
    )
