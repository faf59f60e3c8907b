"""Global configuration for the Meal Reminders service."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Local data (schedule store, logs)
DATA_DIR = Path(os.getenv("MEAL_DATA_DIR", Path(os.getenv("LOCALAPPDATA", ".")) / "meal-reminders"))

# Logging
LOG_DIR = DATA_DIR / "logs"
LOG_DIR.mkdir(parents=True, exist_ok=True)
LOG_LEVEL = os.getenv("MEAL_LOG_LEVEL", "INFO").upper()

# HTTP API
API_HOST = os.getenv("MEAL_API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("MEAL_API_PORT", "8110"))
