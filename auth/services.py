""" Module to initialize the OAuth providers and handle the core login flow """

import logging
from dataclasses import dataclass
from typing import Optional, Union
import requests
from flask import current_app
from werkzeug.exceptions import NotFound
from pymongo.errors import PyMongoError
from authlib.integrations.flask_client import OAuth
from authlib.integrations.base_client import OAuthError
from database import user_services
from errors import AuthenticationDeniedError, ProfileIncompleteError, ProviderError

# Authlib registration arguments for every provider we know how to talk to
PROVIDER_REGISTRATIONS = {
    'github': {
        'access_token_url': 'https://github.com/login/oauth/access_token',
        'authorize_url': 'https://github.com/login/oauth/authorize',
        'api_base_url': 'https://api.github.com/',
        'client_kwargs': {'scope': 'user:email'},
    },
    'google': {
        # Google's OpenID Connect discovery document, Authlib configures itself from it
        'server_metadata_url': 'https://accounts.google.com/.well-known/openid-configuration',
        'client_kwargs': {'scope': 'openid email profile'},
    },
}

PROVIDER_DISPLAY_NAMES = {
    'github': 'GitHub',
    'google': 'Google',
}


@dataclass(frozen=True)
class Profile:
    """Provider profile, normalized to the fields we store."""
    id: str
    display_name: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None


@dataclass(frozen=True)
class Authenticated:
    user: dict


@dataclass(frozen=True)
class Denied:
    reason: str


@dataclass(frozen=True)
class Failed:
    cause: Exception


AuthResult = Union[Authenticated, Denied, Failed]


def display_name_for(provider_name):
    return PROVIDER_DISPLAY_NAMES.get(provider_name, provider_name.title())


class OAuthProvider:
    """
    Wraps one Authlib client.
    Subclasses know how to turn the provider's answer into a Profile.
    """
    enabled = True

    def __init__(self, config, client):
        self.config = config
        self.client = client

    @property
    def name(self):
        return self.config.name

    @property
    def display_name(self):
        return display_name_for(self.name)

    def authorize_redirect(self):
        """Send the browser to the provider's consent page."""
        return self.client.authorize_redirect(self.config.callback_url)

    def fetch_profile(self):
        """
        Exchange the callback's code for a token and return the user's Profile.
        Must be called while handling the provider's callback request.
        """
        try:
            token = self.client.authorize_access_token()
            raw_profile = self.fetch_raw_profile(token)
        except OAuthError as e:
            if e.error == 'access_denied':
                raise AuthenticationDeniedError(
                    f"{self.display_name} login was cancelled: {e.description or e.error}"
                ) from e
            if e.error == 'mismatching_state':
                # Stale or replayed callback, the user has to start the login again
                raise AuthenticationDeniedError(
                    f"{self.display_name} callback state did not match the login request"
                ) from e
            raise ProviderError(f"{self.display_name} token exchange failed: {e}") from e
        except requests.RequestException as e:
            raise ProviderError(f"Could not reach {self.display_name}: {e}") from e

        if not raw_profile:
            raise ProfileIncompleteError(f"{self.display_name} did not return a profile.")
        profile = self.normalize_profile(raw_profile)
        if not profile.id:
            raise ProfileIncompleteError(f"{self.display_name} profile has no id.")
        return profile

    def fetch_raw_profile(self, token):
        raise NotImplementedError

    def normalize_profile(self, raw_profile):
        raise NotImplementedError


class GitHubProvider(OAuthProvider):
    """GitHub OAuth apps: the profile comes from the REST API, not the token."""

    def fetch_raw_profile(self, token):
        resp = self.client.get('user', token=token)
        resp.raise_for_status()
        raw_profile = resp.json()

        # The public email is often hidden, fall back to the primary verified address
        if raw_profile and not raw_profile.get('email'):
            emails_resp = self.client.get('user/emails', token=token)
            if emails_resp.ok:
                raw_profile['email'] = primary_email(emails_resp.json())
        return raw_profile

    def normalize_profile(self, raw_profile):
        github_id = raw_profile.get('id')
        return Profile(
            id=str(github_id) if github_id is not None else None,
            display_name=raw_profile.get('name') or raw_profile.get('login'),
            username=raw_profile.get('login'),
            email=raw_profile.get('email'),
            avatar_url=raw_profile.get('avatar_url'),
        )


class GoogleProvider(OAuthProvider):
    """Google OpenID Connect: Authlib parses the id_token into 'userinfo'."""

    def fetch_raw_profile(self, token):
        return token.get('userinfo')

    def normalize_profile(self, raw_profile):
        return Profile(
            id=raw_profile.get('sub'),
            display_name=raw_profile.get('name'),
            email=raw_profile.get('email'),
            avatar_url=raw_profile.get('picture'),
        )


class DisabledProvider:
    """Stands in for a provider whose credentials are not configured."""
    enabled = False

    def __init__(self, config):
        self.config = config

    @property
    def name(self):
        return self.config.name


PROVIDER_CLASSES = {
    'github': GitHubProvider,
    'google': GoogleProvider,
}


def primary_email(emails):
    """Pick the primary verified address out of GitHub's /user/emails list."""
    for entry in emails or []:
        if entry.get('primary') and entry.get('verified'):
            return entry.get('email')
    for entry in emails or []:
        if entry.get('verified'):
            return entry.get('email')
    return None


def init_oauth(app, settings):
    """
    Build the OAuth client for the app and one adapter per provider.
    Providers without credentials are disabled, not fatal.
    """
    oauth = OAuth(app)
    providers = {}

    for name, provider_config in settings.providers.items():
        if not provider_config.enabled:
            logging.warning(
                "%s OAuth env vars missing (%s); %s login is disabled.",
                display_name_for(name),
                ', '.join(provider_config.missing_variables),
                display_name_for(name)
            )
            providers[name] = DisabledProvider(provider_config)
            continue

        registration = PROVIDER_REGISTRATIONS[name]
        client_kwargs = dict(registration['client_kwargs'])
        # Bound every HTTP call Authlib makes to the provider
        client_kwargs['default_timeout'] = settings.oauth_timeout_seconds
        client = oauth.register(
            name=name,
            client_id=provider_config.client_id,
            client_secret=provider_config.client_secret,
            **{key: value for key, value in registration.items() if key != 'client_kwargs'},
            client_kwargs=client_kwargs
        )
        providers[name] = PROVIDER_CLASSES[name](provider_config, client)

    app.extensions['auth_providers'] = providers
    return providers


def get_provider(name):
    """Return the enabled adapter called name, or 404 if there is none."""
    provider = current_app.extensions.get('auth_providers', {}).get(name)
    if provider is None or not provider.enabled:
        raise NotFound(f"Login with '{name}' is not available.")
    return provider


def complete_login(provider) -> AuthResult:
    """
    Handles the OAuth token exchange and retrieves or creates the local user.
    Never raises for login failures, the outcome is in the returned AuthResult.
    """
    try:
        profile = provider.fetch_profile()
    except AuthenticationDeniedError as e:
        return Denied(e.message)
    except ProviderError as e:
        return Failed(e)

    try:
        user = user_services.resolve_user(provider.name, profile)
    except PyMongoError as e:
        return Failed(e)

    if user is None:
        return Failed(RuntimeError(f"No user resolved for {provider.name} id {profile.id}"))
    return Authenticated(user)
