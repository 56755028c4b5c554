import os
from pathlib import Path
from BackEnd.core import config

def user_data_dir(app_name=None):
	"""Return per-user data dir (Windows/macOS/Linux)."""
	app_name = app_name or config.APP_NAME
	if os.name == "nt":
		base = os.environ.get("LOCALAPPDATA", os.path.expanduser("~\\AppData\\Local"))
	elif os.name == "posix":
		base = os.environ.get("XDG_DATA_HOME", os.path.expanduser("~/.local/share"))
	else:
		base = os.path.expanduser("~")
	path = Path(base) / app_name
	path.mkdir(parents=True, exist_ok=True)
	return path

def db_path():
	"""Return Path to the database, honouring CONCURSOFLOW_DB."""
	override = os.environ.get("CONCURSOFLOW_DB")
	if override:
		return Path(override)
	return user_data_dir() / "concursoflow.db"
