import os
import sys
import time
from PySide6.QtCore import QCoreApplication, QObject, QTimer, Signal
from tt.common.logger import log
from tt.core.config import settings_from_dict
from tt.core.session import TournamentSession, RoundStarted, MatchOver, GameReset

TICK_INTERVAL_MS = 25

# Maps TT_* environment variables onto settings keys for the headless runner.
_ENV_SETTINGS = {
    "TT_MATCH_TIME": ("match_time", int),
    "TT_ROUNDS": ("rounds", int),
    "TT_STARTING_BID": ("starting_bid", float),
    "TT_BID_MULTIPLIER": ("bid_multiplier", float),
    "TT_ROUND_EXPONENT": ("round_exponent", float),
    "TT_CHIP_DENOMINATION": ("chip_denomination", int),
}


# Drives a TournamentSession from a QTimer on the Qt event loop and re-publishes each tick and one-shot event as a
# signal. Everything happens on the thread that owns the driver, so no locking is needed.
class MatchDriver(QObject):
    ticked = Signal(object)
    roundStarted = Signal(int)
    matchOver = Signal()
    gameReset = Signal()

    def __init__(self, session=None, interval_ms=TICK_INTERVAL_MS, parent=None):
        super().__init__(parent)
        self.session = session or TournamentSession()
        self.last_view = None

        # -- Tick timer (25 ms) --
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._tick)

    # Starts and stops the tick source itself, independent of whether the match clock is running.
    def attach(self):
        self._timer.start()
    def detach(self):
        self._timer.stop()

    # Commands forwarded to the session. Each one ticks once right away so listeners see the new state without waiting
    # for the next timeout.
    def start(self):
        self.session.start()
        self._tick()
    def pause(self):
        self.session.pause()
        self._tick()
    def restart(self):
        self.session.restart()
        self._tick()
    def reset_to_defaults(self):
        self.session.reset_to_defaults()
        self._tick()
    def update_settings(self, **changes):
        restarted = self.session.update_settings(**changes)
        self._tick()
        return restarted

    def _tick(self):
        view = self.session.tick()
        if view is None:
            return
        self.last_view = view
        for event in view.events:
            if isinstance(event, RoundStarted):
                self.roundStarted.emit(event.number)
            elif isinstance(event, MatchOver):
                self.matchOver.emit()
            elif isinstance(event, GameReset):
                self.gameReset.emit()
        self.ticked.emit(view)


# Reads TT_* overrides from the environment. Values that don't parse are passed along as-is so the settings boundary
# rejects and logs them.
def settings_from_env(environ=None):
    environ = os.environ if environ is None else environ
    overrides = {}
    for env_key, (setting_key, cast) in _ENV_SETTINGS.items():
        raw = environ.get(env_key)
        if raw is None or not raw.strip():
            continue
        try:
            overrides[setting_key] = cast(raw)
        except ValueError:
            overrides[setting_key] = raw
    return settings_from_dict(overrides)


# Headless runner: plays one match with settings from the environment, printing round changes and the clock once per
# second, and exits when the match is over.
def main():
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    settings = settings_from_env()
    driver = MatchDriver(TournamentSession(settings))

    last_printed = {"second": None}
    def _print_tick(view):
        second = (view.minutes_display, view.seconds_display)
        if second != last_printed["second"]:
            last_printed["second"] = second
            print(f"Round {view.current_round}  {view.minutes_display}:{view.seconds_display}  "
                  f"bids {view.small_bid}/{view.large_bid}", flush=True)
    def _on_round(number):
        print(f"Round {number} started. Bids have been multiplied.", flush=True)
    def _on_match_over():
        print("Game over. Total time has elapsed.", flush=True)
        driver.detach()
        app.quit()

    driver.ticked.connect(_print_tick)
    driver.roundStarted.connect(_on_round)
    driver.matchOver.connect(_on_match_over)

    log.info(f"Starting headless match at {time.strftime('%H:%M:%S')} with {settings}")
    driver.attach()
    driver.start()
    return app.exec()
