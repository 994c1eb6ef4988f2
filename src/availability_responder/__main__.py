"""
Responder entry point.

Usage:
    python -m availability_responder

Configuration is read from the environment; see ``config.Settings``.
"""

import logging
import sys

from .auth import AuthorizationManager, CredentialStore
from .config import Settings
from .exceptions import ConfigurationError
from .notifications import NotificationSender
from .orchestrator import AvailabilityOrchestrator
from .policy import AccessPolicy
from .services.calendar import CalendarAvailabilityResolver
from .utils.log_sanitizer import sanitize_for_logging
from .webhook import create_app

logger = logging.getLogger("availability_responder")


def build_components(settings: Settings):
    """
    Wire the core components from settings.

    Returns:
        Tuple of (auth_manager, orchestrator)
    """
    auth_manager = AuthorizationManager(
        client_config=settings.client_config(),
        store=CredentialStore(settings.token_path),
        redirect_uri=settings.google_redirect_uri,
    )
    auth_manager.initialize()

    orchestrator = AvailabilityOrchestrator(
        policy=AccessPolicy(settings.whitelisted_numbers),
        resolver=CalendarAvailabilityResolver(auth_manager, calendar_id=settings.google_calendar_id),
        sender=NotificationSender(
            settings.twilio_account_sid,
            settings.twilio_auth_token,
            settings.twilio_phone_number,
        ),
        is_at_home=settings.is_at_home,
        max_workers=settings.worker_threads,
    )
    return auth_manager, orchestrator


def main() -> int:
    try:
        settings = Settings.from_env().validate()
    except ConfigurationError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error("Failed to initialize Google Client: %s", e)
        return 1

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    auth_manager, orchestrator = build_components(settings)
    app = create_app(
        auth_manager,
        orchestrator,
        calendar_id=settings.google_calendar_id,
        sms_enabled=settings.sms_enabled,
    )

    sanitized = sanitize_for_logging(
        allow_list=settings.whitelisted_numbers, sender=settings.twilio_phone_number
    )
    logger.info("Server listening on port %s", settings.port)
    logger.info("Whitelisted numbers: %s", sanitized['allow_list'])
    logger.info("Twilio Number: %s", sanitized['sender'])
    logger.info("Location Placeholder (Is At Home): %s", settings.is_at_home)
    if not auth_manager.is_authorized:
        logger.info("Google Calendar needs authorization. Visit /authorize in your browser.")

    try:
        app.run(host=settings.host, port=settings.port)
    finally:
        orchestrator.shutdown(wait=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
