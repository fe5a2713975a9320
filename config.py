""" Application settings loaded from the environment """
import os
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from dotenv import load_dotenv

DEV_SECRET_KEY = 'dev-only-insecure-session-secret'
KNOWN_PROVIDERS = ('github', 'google')


@dataclass(frozen=True)
class ProviderConfig:
    """Credentials for a single OAuth provider."""
    name: str
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    callback_url: Optional[str] = None

    @property
    def enabled(self):
        """A provider is only usable when every credential is present."""
        return bool(self.client_id and self.client_secret and self.callback_url)

    @property
    def missing_variables(self):
        """Names of the environment variables that still need a value."""
        prefix = self.name.upper()
        values = {
            f'{prefix}_CLIENT_ID': self.client_id,
            f'{prefix}_CLIENT_SECRET': self.client_secret,
            f'{prefix}_CALLBACK_URL': self.callback_url,
        }
        return [name for name, value in values.items() if not value]

    @classmethod
    def from_env(cls, name):
        prefix = name.upper()
        return cls(
            name=name,
            client_id=os.getenv(f'{prefix}_CLIENT_ID'),
            client_secret=os.getenv(f'{prefix}_CLIENT_SECRET'),
            callback_url=os.getenv(f'{prefix}_CALLBACK_URL'),
        )


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_int(name, default):
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logging.warning("Ignoring non-integer value for %s: %r", name, value)
        return default


def _env_list(name, default):
    """Comma separated values, e.g. CORS_ORIGINS=https://a.example,https://b.example"""
    value = os.getenv(name)
    if not value:
        return default
    return [item.strip() for item in value.split(',') if item.strip()] or default


@dataclass(frozen=True)
class Settings:
    """
    Everything the application needs at startup.
    Built once and handed to create_app; nothing reads os.environ after that.
    """
    mongo_uri: str = 'mongodb://localhost:27017/'
    db_name: str = 'bookstore'
    secret_key: str = DEV_SECRET_KEY
    session_ttl_seconds: int = 86400
    cookie_secure: bool = False
    oauth_timeout_seconds: int = 10
    log_level: str = 'INFO'
    port: int = 4000
    cors_origins: List[str] = field(default_factory=lambda: ['*'])
    providers: Dict[str, ProviderConfig] = field(
        default_factory=lambda: {name: ProviderConfig(name) for name in KNOWN_PROVIDERS}
    )

    @classmethod
    def from_env(cls):
        """Read a .env file if there is one, then the process environment."""
        load_dotenv()
        secret_key = os.getenv('SESSION_SECRET') or os.getenv('SECRET_KEY')
        if not secret_key:
            logging.warning(
                "SESSION_SECRET is not set; falling back to an insecure development key."
            )
            secret_key = DEV_SECRET_KEY

        return cls(
            mongo_uri=os.getenv('MONGO_CONNECTION', 'mongodb://localhost:27017/'),
            db_name=os.getenv('PROJECT_DATABASE', 'bookstore'),
            secret_key=secret_key,
            session_ttl_seconds=_env_int('SESSION_TTL_SECONDS', 86400),
            cookie_secure=_env_bool('COOKIE_SECURE'),
            oauth_timeout_seconds=_env_int('OAUTH_TIMEOUT_SECONDS', 10),
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
            port=_env_int('PORT', 4000),
            cors_origins=_env_list('CORS_ORIGINS', ['*']),
            providers={name: ProviderConfig.from_env(name) for name in KNOWN_PROVIDERS},
        )
