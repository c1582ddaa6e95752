"""Runtime configuration read from the environment (and a local .env file)."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

ROOT_DIR = Path(__file__).resolve().parents[1]

# Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_KEY = os.getenv("SUPABASE_KEY", "")
SUPABASE_STORAGE_BUCKET = os.getenv("SUPABASE_STORAGE_BUCKET", "job-board")

# Seconds between snapshot fetches of a live subscription
SNAPSHOT_POLL_INTERVAL = float(os.getenv("SNAPSHOT_POLL_INTERVAL", "5"))

# Admin access
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")
ADMIN_SESSION_FILE = Path(os.getenv("ADMIN_SESSION_FILE", str(ROOT_DIR / ".admin_session.json")))
ADMIN_SESSION_HOURS = float(os.getenv("ADMIN_SESSION_HOURS", "24"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
