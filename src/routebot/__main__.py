"""Entry point for `python -m routebot`."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv


def main() -> None:
    # Load .env from canonical locations before anything else.
    load_dotenv("config/.env")  # Primary
    load_dotenv()               # Fallback (CWD/.env)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    log = logging.getLogger("routebot")

    from routebot.config import get_settings, has_config

    if not has_config():
        log.error("No configuration found (missing DISCORD_TOKEN / DISCORD_APPLICATION_ID).")
        log.error("Copy config/.env.example to config/.env, fill it in, then restart.")
        sys.exit(1)

    # Validate config early
    try:
        settings = get_settings()
    except Exception as e:
        log.error("Configuration error: %s", e)
        log.error("")
        log.error("  How to fix:")
        log.error("  1. Edit config/.env (or set environment variables)")
        log.error("  2. Ensure DISCORD_TOKEN and DISCORD_APPLICATION_ID are set")
        log.error("  3. Colours must be hex values, e.g. SUCCESS_COLOR=#57F287")
        log.error("")
        sys.exit(1)

    log.info("Starting routebot...")
    log.info("AI proxy: %s", settings.AI_ENDPOINT_URL)
    log.info("Image proxy: %s", settings.IMAGE_ENDPOINT_URL)
    if settings.FEEDBACK_CHANNEL_ID is None:
        log.info("Feedback relay disabled (FEEDBACK_CHANNEL_ID not set)")

    from routebot.bot import RouteBot

    bot = RouteBot(settings)
    bot.run(settings.DISCORD_TOKEN, log_handler=None)


if __name__ == "__main__":
    main()
