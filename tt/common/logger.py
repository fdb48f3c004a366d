import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler
from tt.common.setup import PATHS

LOG_NAME = "tournamenttimer"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Builds and attaches a handler under `handler_name` unless one with that name is already there, so calling
# get_logger twice never doubles up lines or truncates latest.log.
def _attach(logger, handler_name, make_handler, level):
    if any(h.get_name() == handler_name for h in logger.handlers):
        return
    handler = make_handler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT,LOG_DATE_FORMAT))
    handler.set_name(handler_name)
    logger.addHandler(handler)

# Deletes all but the newest `keep` per-match debug logs.
def _prune_debug_logs(logger, keep):
    runs = sorted(PATHS.debug_logs.glob(f"{LOG_NAME}_*.log"),key=lambda p: p.stat().st_mtime,reverse=True)
    for run in runs[keep:]:
        try:
            run.unlink()
        except OSError:
            logger.debug(f"Could not prune old debug log '{run}'")

# Builds the shared logger. Match events (starts, pauses, round changes, match over) go to the rotating
# tournamenttimer.log and to latest.log at `level`. Every run also gets its own debug log, which is where the
# once-per-second tick lines from TournamentSession end up, so a disputed round or bid can be replayed afterwards.
def get_logger(level=logging.INFO, debug_runs=10):
    logger = logging.getLogger(LOG_NAME)
    logger.propagate = False
    logger.setLevel(logging.DEBUG if debug_runs > 0 else level)

    _attach(logger, f"{LOG_NAME}:persistent",
            lambda: RotatingFileHandler(PATHS.logs / f"{LOG_NAME}.log", maxBytes=2 * 1024 * 1024, backupCount=3, encoding="utf-8"),
            level)
    _attach(logger, f"{LOG_NAME}:latest",
            lambda: logging.FileHandler(PATHS.logs / "latest.log", mode="w", encoding="utf-8"),
            level)
    if debug_runs > 0:
        this_run = PATHS.debug_logs / f"{LOG_NAME}_{datetime.now():%Y-%m-%d_%H-%M-%S}.log"
        _attach(logger, f"{LOG_NAME}:match_debug", lambda: logging.FileHandler(this_run, encoding="utf-8"), logging.DEBUG)
        _prune_debug_logs(logger, debug_runs)
    return logger

log = get_logger()
log.info("=== INITIALIZED NEW SESSION ===")
