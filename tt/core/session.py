"""Tournament session - ties settings, the match clock and round/bid math together for one game."""

import time
from dataclasses import dataclass
from tt.common.logger import log
from tt.core.clock import Clock
from tt.core.config import default_settings, update_settings
from tt.core.rounds import calculate


#region === Events ===

@dataclass(frozen=True)
class RoundStarted:
    number: int

@dataclass(frozen=True)
class MatchOver:
    pass

@dataclass(frozen=True)
class GameReset:
    pass

#endregion === Events ===


# Everything the presentation layer needs for one tick.
@dataclass(frozen=True)
class TickView:
    current_round: int
    round_progress: float
    overall_fraction: float
    minutes_display: str
    seconds_display: str
    small_bid: int
    large_bid: int
    running: bool
    has_finished: bool
    has_game_started: bool
    events: tuple = ()


class TournamentSession:
    """One game of the tournament timer.

    ``tick(now)`` is meant to be called at a fixed cadence by whatever drives the session. Round changes and the end
    of the match are detected by comparing against the previous tick, so each one produces exactly one event in the
    returned TickView, however many ticks land inside the same round. Commands and ticks are expected to come from the
    same thread.
    """

    def __init__(self, settings=None, time_source=time.time):
        self.settings = settings or default_settings()
        self.time_source = time_source
        self.clock = Clock(self.settings.total_seconds, time_source=time_source)
        self.has_game_started = False
        self._last_round = None
        self._finished = False
        self._pending_events = []
        self._last_logged_display = None
        self.restart()

    def _now(self, now):
        return self.time_source() if now is None else now

    @property
    def running(self):
        return self.clock.running

    #region === Commands ===

    def start(self, now=None):
        if self._finished:
            log.info("Ignoring start, match is over - restart to play again")
            return
        self.has_game_started = True
        self.clock.start(self._now(now))
        log.info("Game started")

    def pause(self, now=None):
        if not self.clock.running:
            return
        self.clock.pause(self._now(now))
        log.info("Game paused")

    # Throws away the current game but keeps the settings. The clock is left stopped and full.
    def restart(self, now=None):
        self.clock.restart(self._now(now), total_seconds=self.settings.total_seconds)
        self.has_game_started = False
        self._last_round = None
        self._finished = False
        log.info(f"Restarted game with {self.settings}")

    def reset_to_defaults(self, now=None):
        self.settings = default_settings()
        self.restart(now)
        self._pending_events.append(GameReset())
        log.info("Reset game settings to defaults")

    # Applies setting changes through the settings boundary (invalid values are kept at their previous value). Changes
    # that affect the match itself restart the game. Returns True if a restart happened.
    def update_settings(self, now=None, **changes):
        new_settings = update_settings(self.settings, **changes)
        changed = new_settings.changed_fields(self.settings)
        if not changed:
            return False
        restart = new_settings.requires_restart(self.settings)
        self.settings = new_settings
        log.info(f"Updated settings: {', '.join(sorted(changed))}")
        if restart:
            self.restart(now)
        return restart

    #endregion === Commands ===

    # Samples the clock and derives everything for this tick. Returns None while the clock isn't ready yet.
    def tick(self, now=None):
        now = self._now(now)
        sample = self.clock.sample(now)
        if sample is None:
            return None
        state = calculate(sample.elapsed_seconds, self.settings)

        events, self._pending_events = self._pending_events, []
        if self._last_round is not None and state.round != self._last_round and self.has_game_started:
            events.append(RoundStarted(state.round))
            log.info(f"Round {state.round} started, bids are now {state.bids.small_bid}/{state.bids.large_bid}")
        self._last_round = state.round

        if sample.has_finished and not self._finished:
            self._finished = True
            if self.has_game_started:
                events.append(MatchOver())
                self.has_game_started = False
                self.clock.pause(now)
                log.info("Match over, total time has elapsed")

        # Once per displayed second, for the per-run debug log.
        display = (sample.minutes_display, sample.seconds_display)
        if sample.running and display != self._last_logged_display:
            self._last_logged_display = display
            log.debug(f"Tick {display[0]}:{display[1]} elapsed={sample.elapsed_seconds:.3f}s round={state.round} "
                      f"progress={state.progress:.3f} bids={state.bids.small_bid}/{state.bids.large_bid}")

        return TickView(
            current_round=state.round,
            round_progress=state.progress,
            overall_fraction=sample.elapsed_fraction,
            minutes_display=sample.minutes_display,
            seconds_display=sample.seconds_display,
            small_bid=state.bids.small_bid,
            large_bid=state.bids.large_bid,
            running=self.clock.running,
            has_finished=sample.has_finished,
            has_game_started=self.has_game_started,
            events=tuple(events),
        )
