"""Optional logfire observability for the LLM commander."""

from __future__ import annotations

import os

import logfire

from infra.logger import get_logger

log = get_logger(__name__)

_configured = False


def configure_logfire(service_name: str = "alpha-strike-engine") -> bool:
    """
    Configure logfire and instrument pydantic-ai once per process.

    Does nothing unless LOGFIRE_TOKEN is set, so local runs and tests
    never send telemetry.

    Returns:
        True when logfire is active
    """
    global _configured
    if _configured:
        return True
    if not os.getenv("LOGFIRE_TOKEN"):
        log.debug("LOGFIRE_TOKEN not set; logfire disabled")
        return False

    logfire.configure(service_name=service_name, send_to_logfire="if-token-present")
    logfire.instrument_pydantic_ai()
    _configured = True
    log.info("logfire configured for %s", service_name)
    return True
