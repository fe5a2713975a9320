"""
Error taxonomy for the API and the single JSON error responder.
Every error raised by a view ends up in one of the handlers below.
"""
import logging
from flask import jsonify
from werkzeug.exceptions import HTTPException

GENERIC_ERROR_MESSAGE = "An internal server error occurred."


class ApiError(Exception):
    """Base class for errors that map onto an HTTP response."""
    status_code = 500

    def __init__(self, message=None):
        super().__init__(message or GENERIC_ERROR_MESSAGE)
        self.message = message or GENERIC_ERROR_MESSAGE

    @property
    def public_message(self):
        """The message that is safe to send to the client."""
        if self.status_code >= 500:
            return GENERIC_ERROR_MESSAGE
        return self.message


class ValidationError(ApiError):
    """A required field is missing or has the wrong type."""
    status_code = 400


class NotAuthenticatedError(ApiError):
    """No logged in user is attached to the request."""
    status_code = 401


class AuthenticationDeniedError(ApiError):
    """The provider refused the login, or the user cancelled it."""
    status_code = 401


class ProfileIncompleteError(AuthenticationDeniedError):
    """The provider answered, but without a usable profile."""


class ResourceNotFoundError(ApiError):
    """An id lookup missed."""
    status_code = 404


class ProviderError(ApiError):
    """Network or provider-side failure while exchanging the OAuth code."""
    status_code = 500


def register_error_handlers(app):
    """Attach the JSON error handlers to the Flask app."""

    @app.errorhandler(ApiError)
    def handle_api_error(e):
        if e.status_code >= 500:
            # The real cause stays in the server log
            logging.error("%s: %s", type(e).__name__, e.message, exc_info=e)
        return jsonify({"message": e.public_message}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        """
        Return JSON instead of HTML for HTTP errors.
        This handler preserves the original status code of the exception.
        """
        return jsonify({"message": e.description, "code": e.code}), e.code

    @app.errorhandler(Exception)
    def handle_exception(e): # pylint: disable=unused-argument
        """
        Catches unhandled exceptions, logs the traceback
        and returns a generic 500 JSON response.
        """
        logging.exception("Unhandled exception while serving the request")
        return jsonify({"message": GENERIC_ERROR_MESSAGE}), 500
