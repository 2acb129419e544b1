from .paths import BATTLE_LOG_DIR, ENV_FILE, LOG_DIR, PROJECT_ROOT, STORAGE_DIR
from .logger import configure_from_settings, configure_logging, get_logger
from .settings import EngineSettings, get_settings

__all__ = [
    "BATTLE_LOG_DIR",
    "ENV_FILE",
    "LOG_DIR",
    "PROJECT_ROOT",
    "STORAGE_DIR",
    "EngineSettings",
    "configure_from_settings",
    "configure_logging",
    "get_logger",
    "get_settings",
]
