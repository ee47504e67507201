"""Configuration for the flixauth client."""
from __future__ import annotations

import os
from pathlib import Path

BACKEND_BASE_URL = os.getenv("BACKEND_BASE_URL", "http://localhost:5000/api")
TOKEN_FILE = Path(os.getenv("FLIXAUTH_TOKEN_FILE", str(Path.home() / ".flixauth" / "token.json")))
REQUEST_TIMEOUT = float(os.getenv("FLIXAUTH_REQUEST_TIMEOUT", "30"))
GET_RETRIES = int(os.getenv("FLIXAUTH_GET_RETRIES", "3"))
