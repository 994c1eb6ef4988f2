"""
Flask transport for the responder.

Routes:
- GET  /                - Health check
- GET  /status          - Authorization and channel status
- GET  /authorize       - Redirect to the Google consent screen
- GET  /oauth2callback  - OAuth callback from Google
- POST /sms             - Twilio inbound SMS webhook
"""

import logging

from flask import Flask, Response, jsonify, redirect, request
from twilio.twiml.messaging_response import MessagingResponse

from .auth.manager import AuthorizationManager
from .exceptions import AvailabilityResponderError, ExchangeFailedError, MissingCodeError
from .orchestrator import AccessRequest, AvailabilityOrchestrator

logger = logging.getLogger(__name__)


def create_app(
        auth_manager: AuthorizationManager,
        orchestrator: AvailabilityOrchestrator,
        calendar_id: str = "primary",
        sms_enabled: bool = False
) -> Flask:
    """
    Build the Flask application around already-initialized core components.

    Args:
        auth_manager: Owner of the Google credential
        orchestrator: Availability protocol driver
        calendar_id: Calendar being watched, reported by /status
        sms_enabled: Whether outbound SMS is configured, reported by /status

    Returns:
        Flask application
    """
    app = Flask(__name__)

    @app.route('/')
    def health():
        return "SMS Availability Provider is running.", 200

    @app.route('/status')
    def status():
        return jsonify(
            authorized=auth_manager.is_authorized,
            calendar_id=calendar_id,
            sms_enabled=sms_enabled,
        )

    @app.route('/authorize')
    def authorize():
        auth_url = auth_manager.begin_authorization()
        logger.info("Redirecting for Google authorization...")
        return redirect(auth_url)

    @app.route('/oauth2callback')
    def oauth2_callback():
        error = request.args.get('error')
        if error:
            logger.warning("Google authorization was declined: %s", error)
            return f"Authorization failed: {error}", 400

        try:
            auth_manager.complete_authorization(
                request.args.get('code'),
                state=request.args.get('state'),
            )
        except MissingCodeError:
            return "Authorization code missing.", 400
        except ExchangeFailedError:
            return "Failed to retrieve access token.", 500
        except AvailabilityResponderError as e:
            logger.error("Authorization could not be completed: %s", e)
            return "Failed to store access token.", 500

        return "Authorization successful! You can close this tab."

    @app.route('/sms', methods=['POST'])
    def sms_webhook():
        access_request = AccessRequest(
            requester_id=request.form.get('From', ''),
            message_text=request.form.get('Body', ''),
        )

        if orchestrator.dispatch(access_request) is None:
            return Response(status=204)

        # The reply goes out as a separate SMS; the acknowledgment stays empty
        twiml = MessagingResponse()
        return Response(str(twiml), status=200, mimetype='text/xml')

    return app
