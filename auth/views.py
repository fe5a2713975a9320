"""
This module handles the user-facing endpoints for the authentication process,
including login initiation, the OAuth callback from the identity provider,
the current user lookup and logout.
"""
import logging
from flask import Blueprint, jsonify, request, session
from database import user_services
from errors import NotAuthenticatedError, ProviderError
from . import services
from .decorators import login_user, logout_user, load_current_user

auth_bp = Blueprint('auth', __name__)


def failure_response(provider_name=None):
    if provider_name:
        message = f"{services.display_name_for(provider_name)} authentication failed"
    else:
        message = "Authentication failed"
    return jsonify({"message": message}), 401


@auth_bp.route('/me')
def me():
    """Return the current authenticated user"""
    user = load_current_user()
    if user is None:
        raise NotAuthenticatedError("Not authenticated")
    return jsonify(user_services.user_projection(user)), 200


@auth_bp.route('/logout')
def logout():
    """Logs the current user out by clearing the session."""
    user_id = session.get('user_id')
    logout_user()
    if user_id:
        logging.info("User %s logged out", user_id)
    return jsonify({"message": "Logged out"}), 200


@auth_bp.route('/failure')
def failure():
    """Landing route for failed logins."""
    return failure_response(request.args.get('provider'))


@auth_bp.route('/<provider_name>')
def login(provider_name):
    """Start the OAuth login (redirects to the provider)"""
    provider = services.get_provider(provider_name)
    return provider.authorize_redirect()


@auth_bp.route('/<provider_name>/callback')
def callback(provider_name):
    """Handles the callback from the OAuth service provider."""
    # The provider sends back a single use code in the URL query params;
    # Authlib reads it from flask.request itself
    provider = services.get_provider(provider_name)
    result = services.complete_login(provider)

    if isinstance(result, services.Denied):
        logging.warning("%s login denied: %s", provider.display_name, result.reason)
        return failure_response(provider.name)

    if isinstance(result, services.Failed):
        raise ProviderError(
            f"{provider.display_name} login failed: {result.cause}"
        ) from result.cause

    user = result.user
    login_user(user)
    logging.info("User %s logged in with %s", user['_id'], provider.display_name)
    return jsonify({
        "message": f"Logged in with {provider.display_name}",
        "user": user_services.user_projection(user)
    }), 200
