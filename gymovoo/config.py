"""
Engine configuration.

Values come from the process environment, with a `.env` file loaded first
when present. Everything has a working default so the engine runs with no
configuration at all.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "exercises.json"

CATALOG_PATH = Path(os.getenv("GYMOVOO_CATALOG_PATH", str(DEFAULT_CATALOG_PATH)))
PLAN_WEEKS = int(os.getenv("GYMOVOO_PLAN_WEEKS", "4"))
SMART_EXTRA_MINUTES = int(os.getenv("GYMOVOO_SMART_EXTRA_MINUTES", "5"))
MAX_STORED_PLANS = int(os.getenv("GYMOVOO_MAX_STORED_PLANS", "3"))
LOG_LEVEL = os.getenv("GYMOVOO_LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("GYMOVOO_LOG_FILE") or None
