import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger("ecoflight")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logger.setLevel(level.upper())


def log_startup_config(settings) -> None:
    """Which required settings are present, never their values."""
    logger.info("PORT: %s", settings.PORT)
    logger.info("SUPABASE_URL: %s", "OK" if settings.SUPABASE_URL else "MISSING")
    logger.info("SUPABASE_ANON_KEY: %s", "OK" if settings.SUPABASE_ANON_KEY else "MISSING")
    logger.info("ENV: %s", settings.ENV)
