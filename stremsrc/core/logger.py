import sys

from loguru import logger

from stremsrc.core.log_levels import CUSTOM_LOG_LEVELS, STANDARD_LOG_LEVELS
from stremsrc.core.models import settings


def setupLogger(level: str):
    # Configure custom log levels
    for level_name, level_config in CUSTOM_LOG_LEVELS.items():
        logger.level(
            level_name,
            no=level_config["no"],
            icon=level_config["icon"],
            color=level_config["loguru_color"],
        )

    # Configure standard log levels (override defaults)
    for level_name, level_config in STANDARD_LOG_LEVELS.items():
        logger.level(
            level_name, icon=level_config["icon"], color=level_config["loguru_color"]
        )

    log_format = (
        "<white>{time:YYYY-MM-DD}</white> <magenta>{time:HH:mm:ss}</magenta> | "
        "<level>{level.icon}</level> <level>{level}</level> | "
        "<cyan>{module}</cyan>.<cyan>{function}</cyan> - <level>{message}</level>"
    )

    logger.configure(
        handlers=[
            {
                "sink": sys.stderr,
                "level": level,
                "format": log_format,
                "backtrace": False,
                "diagnose": False,
                "enqueue": True,
            }
        ]
    )


setupLogger(settings.LOG_LEVEL)


def log_extractor_error(stage: str, url: str, media_id: str, error: Exception):
    logger.warning(
        f"Exception during {stage} for {media_id} ({url}), the upstream host is most likely unreachable or changed its markup: {error}"
    )


def log_startup_info(settings):
    logger.log(
        "STREMSRC",
        f"Server started on http://{settings.FASTAPI_HOST}:{settings.FASTAPI_PORT} - {settings.FASTAPI_WORKERS} workers",
    )
    logger.log(
        "STREMSRC",
        f"Add-on: {settings.ADDON_NAME} ({settings.ADDON_ID}) v{settings.ADDON_VERSION}",
    )
    logger.log(
        "STREMSRC",
        f"Source: {settings.SOURCE_URL} - Default Base Domain: {settings.DEFAULT_BASE_DOMAIN}",
    )
    logger.log(
        "STREMSRC",
        f"Embed/RCP Fetch: timeout={settings.EXTRACTOR_TIMEOUT_MS}ms, retries={settings.EXTRACTOR_RETRIES}, backoff={settings.EXTRACTOR_BACKOFF_MS}ms - RCP Concurrency: {settings.RCP_CONCURRENCY_LIMIT}",
    )
    logger.log(
        "STREMSRC",
        f"Player Fetch: timeout={settings.PRORCP_TIMEOUT_MS}ms, retries={settings.PRORCP_RETRIES} - Manifest Fetch: timeout={settings.HLS_TIMEOUT_MS}ms, retries={settings.HLS_RETRIES}, backoff={settings.HLS_BACKOFF_MS}ms",
    )
    logger.log(
        "STREMSRC", f"Request Hard Timeout: {settings.REQUEST_HARD_TIMEOUT}s"
    )
