"""Vercel serverless entrypoint.

Sessions and photos live in process memory and on local disk, so the webhook
needs a single long-lived process; polling via ``plant-catalog-bot`` is the
simpler mode.
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from plant_catalog.api.asgi import app  # noqa: E402

__all__ = ["app"]
