"""Launch the proxy with uvicorn."""
from __future__ import annotations
import argparse
import logging

import uvicorn

from roblox_ai_proxy.common.config import get_settings
from roblox_ai_proxy.common.logging_setup import setup_logging
from roblox_ai_proxy.relay.credentials import has_fallback_key
from roblox_ai_proxy.serve.app import app

LOGGER = logging.getLogger("roblox_ai_proxy.serve.server")


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Run the Roblox AI proxy server")
    ap.add_argument("--host", default=settings.host)
    ap.add_argument("--port", type=int, default=settings.port)
    ap.add_argument("--log-level", default=settings.log_level)
    args = ap.parse_args()

    setup_logging(args.log_level)
    LOGGER.info("Roblox AI Proxy Server starting on %s:%s", args.host, args.port)
    LOGGER.info("Default model: %s | debug=%s", settings.default_model, settings.debug)
    if has_fallback_key(settings):
        LOGGER.info("Server-held keys enabled for: %s", ", ".join(settings.fallback_providers))
    else:
        LOGGER.info("No server-held keys; callers must supply 'apiKey'")

    uvicorn.run(app, host=args.host, port=args.port, log_config=None)

if __name__ == "__main__":
    main()
