"""Collection names and NHL game states used by the pipeline."""

TEAMS_COLLECTION = "teams"
GAMES_COLLECTION = "games"

# Hard cap on how far back a single run may reach.
MAX_DAYS_TO_INGEST = 365

# Games in these states have (or had) a live boxscore worth fetching.
# FUT and PRE are scheduled/pre-game and skipped.
GAME_STATES_FOR_DETAILS: frozenset[str] = frozenset({"LIVE", "CRIT", "FINAL", "OFF"})

UNKNOWN_STATUS = "UNKNOWN"
UNKNOWN_TEAM = "UNKNOWN_TEAM"
