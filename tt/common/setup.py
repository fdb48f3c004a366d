import os
from pathlib import Path
from dataclasses import dataclass

# Picks the base folder for user data. TT_DATA_DIR wins, then APPDATA (Windows), then the XDG data home.
def _resolve_data_root():
    explicit = os.getenv("TT_DATA_DIR", "").strip()
    if explicit:
        return Path(explicit)
    appdata = os.getenv("APPDATA")
    if appdata:
        return Path(appdata) / "TournamentTimer"
    xdg = os.getenv("XDG_DATA_HOME")
    base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    return base / "tournament-timer"

# Dataclass for accessing paths across program. Only logs are written to disk, settings live with the caller.
@dataclass(frozen=True)
class ProjectPaths:

    logs: Path
    debug_logs: Path

    @staticmethod
    def build(data_root=None):
        logs = Path(data_root or _resolve_data_root()) / "logs"
        debug_logs = logs / "debug"
        debug_logs.mkdir(parents=True,exist_ok=True)
        return ProjectPaths(logs=logs, debug_logs=debug_logs)
PATHS = ProjectPaths.build()
