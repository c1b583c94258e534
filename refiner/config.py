"""Runtime settings, read from the environment (and a local .env file)."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "").strip()
DEFAULT_MODEL = os.getenv("CLOZE_REFINER_MODEL", "gpt-4.1-mini")
DEFAULT_TEMPERATURE = float(os.getenv("CLOZE_REFINER_TEMPERATURE", "0.2"))

MODELS = [
    "gpt-4.1-mini",
    "gpt-4.1",
    "gpt-4o-mini",
    "gpt-4o",
]

# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------
DEFAULT_DELIMITER = os.getenv("CLOZE_REFINER_DELIMITER", "===CARD===")

# Policy, not a setting: a cloze never hides more than three words.
MAX_CLOZE_WORDS = 3

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.getenv("CLOZE_REFINER_LOG_LEVEL", "INFO").upper()
LOG_JSON = os.getenv("CLOZE_REFINER_LOG_JSON", "").lower() in ("1", "true", "yes")
