import logging
import os


def configure_logging() -> None:
    """Configure timestamped logging defaults for the API and the worker."""
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    # telethon is chatty at INFO about connection housekeeping
    logging.getLogger("telethon").setLevel(max(logging.getLogger().level, logging.WARNING))
