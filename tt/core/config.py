import math
from dataclasses import dataclass, asdict, fields
from numbers import Real
from tt.common.logger import log

#region === Defaults and Ranges ===

# Default values for a fresh game.
_SETTINGS_DEFAULTS = {
    "match_time": 30,
    "rounds": 3,
    "starting_bid": 10,
    "bid_multiplier": 2,
    "round_exponent": 1.0,
    "chip_denomination": 10,
}

MAX_MATCH_TIME = 1000

# Ceiling for starting_bid ** round_exponent. Anything bigger is no longer a usable chip amount.
MAX_BASE_BID = 10 ** 12

# Changing any of these mid-game throws the current game away. round_exponent and chip_denomination only change how
# bids are displayed, so the running game is kept.
RESTART_FIELDS = frozenset({"match_time", "rounds", "starting_bid", "bid_multiplier"})

# Per-field acceptance checks. Anything that fails gets the default instead.
def _is_number(value):
    if not isinstance(value, Real) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False
def _is_int(value):
    return _is_number(value) and float(value).is_integer()

_VALIDATORS = {
    "match_time": lambda v: _is_int(v) and 1 <= v <= MAX_MATCH_TIME,
    "rounds": lambda v: _is_int(v) and v >= 1,
    "starting_bid": lambda v: _is_number(v) and v > 0,
    "bid_multiplier": lambda v: _is_number(v) and v >= 2,
    "round_exponent": lambda v: _is_number(v) and v > 0,
    "chip_denomination": lambda v: _is_int(v) and v >= 1,
}
_INT_FIELDS = {"match_time", "rounds", "chip_denomination"}

def _base_bid_in_range(starting_bid, round_exponent):
    try:
        return starting_bid ** round_exponent <= MAX_BASE_BID
    except OverflowError:
        return False

#endregion === Defaults and Ranges ===

#region === Settings Record ===

@dataclass(frozen=True)
class GameSettings:
    match_time: int = _SETTINGS_DEFAULTS["match_time"]
    rounds: int = _SETTINGS_DEFAULTS["rounds"]
    starting_bid: float = _SETTINGS_DEFAULTS["starting_bid"]
    bid_multiplier: float = _SETTINGS_DEFAULTS["bid_multiplier"]
    round_exponent: float = _SETTINGS_DEFAULTS["round_exponent"]
    chip_denomination: int = _SETTINGS_DEFAULTS["chip_denomination"]

    # Total match duration in seconds.
    @property
    def total_seconds(self):
        return self.match_time * 60

    # Returns the names of fields whose values differ from `other`.
    def changed_fields(self, other):
        return {f.name for f in fields(self) if getattr(self, f.name) != getattr(other, f.name)}

    def requires_restart(self, other):
        return bool(self.changed_fields(other) & RESTART_FIELDS)

# Helper to return a truly fresh, default settings record.
def default_settings():
    return GameSettings()

#endregion === Settings Record ===

#region === Settings Boundary ===

# Builds a GameSettings out of an untrusted dict (settings form, stored JSON, env overrides). Missing or out of range
# values fall back to `base` (defaults when not given), and everything that got defaulted is reported in a single
# warning. Unknown keys are ignored. This never raises; the round/bid math downstream relies on getting valid input.
def settings_from_dict(data, base=None):
    base = base or default_settings()
    if not isinstance(data, dict):
        log.warning(f"Expected a settings dict, got {type(data).__name__} - using base settings.")
        return base

    values = asdict(base)
    defaulted_values = set()
    for key, value in data.items():
        if key not in _VALIDATORS:
            log.warning(f"Ignoring unknown setting '{key}'")
            continue
        if not _VALIDATORS[key](value):
            defaulted_values.add(key)
            continue
        values[key] = int(value) if key in _INT_FIELDS else value

    # The bid growth base is checked as a pair, a sane bid and a sane exponent can still overflow together.
    if not _base_bid_in_range(values["starting_bid"], values["round_exponent"]):
        defaulted_values.update({"starting_bid", "round_exponent"})
        values["starting_bid"] = base.starting_bid
        values["round_exponent"] = base.round_exponent

    if defaulted_values:
        log.warning(f"Rejected out of range settings, kept previous values for: {', '.join(sorted(defaulted_values))}")
    return GameSettings(**values)

# Returns a plain dict copy of the settings, for whatever persists them.
def settings_to_dict(settings):
    return asdict(settings)

# Convenience wrapper for updating a handful of fields through the same validation as settings_from_dict.
def update_settings(settings, **changes):
    return settings_from_dict(changes, base=settings)

#endregion === Settings Boundary ===
