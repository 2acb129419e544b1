from __future__ import annotations

from pathlib import Path

# Resolved project root (parent directory of this infra package).
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Runtime output: process logs and exported battle logs.
STORAGE_DIR = PROJECT_ROOT / "storage"
LOG_DIR = STORAGE_DIR / "logs"
BATTLE_LOG_DIR = STORAGE_DIR / "battles"

# Optional .env with ENGINE_* settings and LLM provider keys.
ENV_FILE = PROJECT_ROOT / ".env"
