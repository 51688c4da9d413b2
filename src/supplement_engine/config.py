"""Environment-variable-based configuration for the supplement engine."""

from __future__ import annotations

import os
from pathlib import Path

CONFLICT_POLICY: str = os.environ.get("SUPPLEMENT_CONFLICT_POLICY", "strict").lower()
MAX_SESSION_STEPS: int = int(os.environ.get("SUPPLEMENT_MAX_SESSION_STEPS", "100"))
STORE_PATH: Path = Path(
    os.environ.get("SUPPLEMENT_STORE_PATH", "supplements.json")
).expanduser()
LOG_LEVEL: str = os.environ.get("SUPPLEMENT_LOG_LEVEL", "INFO").upper()
DEFAULT_CURRENCY: str = os.environ.get("SUPPLEMENT_DEFAULT_CURRENCY", "USD")
SUPPORTED_CURRENCIES: tuple[str, ...] = ("USD", "EUR", "GBP", "JPY")
