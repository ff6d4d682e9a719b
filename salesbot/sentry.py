import sentry_sdk
import structlog

from salesbot.settings.settings import Settings

logger = structlog.get_logger(__name__)


def setup_sentry(settings: Settings) -> bool:
    """Initialise error reporting. Does nothing when no DSN is configured."""
    config = settings.SENTRY
    if not config.DSN:
        logger.debug("Sentry disabled, no DSN configured")
        return False

    sentry_sdk.init(
        dsn=config.DSN,
        environment=settings.ENVIRONMENT,
        release=f"{settings.APP_NAME}@{settings.APP_VERSION}",
        # Request headers and client IPs are only attached when enabled
        send_default_pii=config.SEND_DEFAULT_PII,
        traces_sample_rate=config.TRACES_SAMPLE_RATE,
    )
    logger.info("Sentry initialised", environment=settings.ENVIRONMENT)
    return True
