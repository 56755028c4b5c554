"""Runtime settings, read once from the environment."""
import os

APP_NAME = os.environ.get("CONCURSOFLOW_APP_NAME", "ConcursoFlow")

# Timer cadence in milliseconds
TICK_INTERVAL_MS = int(os.environ.get("CONCURSOFLOW_TICK_MS", "1000"))

DAILY_GOAL_SECONDS = int(os.environ.get("CONCURSOFLOW_DAILY_GOAL_HOURS", "4")) * 3600

SUMMARY_MAX_LENGTH = int(os.environ.get("CONCURSOFLOW_SUMMARY_MAX", "500"))

LOG_LEVEL = os.environ.get("CONCURSOFLOW_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# How often a running session's figures are written back, for crash recovery
CHECKPOINT_INTERVAL_MS = int(os.environ.get("CONCURSOFLOW_CHECKPOINT_SECONDS", "30")) * 1000
