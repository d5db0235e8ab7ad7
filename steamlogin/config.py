import logging
import os

import marshmallow as ma
from marshmallow.decorators import post_load

from steamlogin.utils.exceptions import ConfigurationException
from steamlogin.utils.http import DEFAULT_TIMEOUT_SECONDS

log = logging.getLogger(__name__)

METHOD_XML = 'xml'
METHOD_API = 'api'

DEFAULT_RETURN_ROUTE = '/auth/steam/callback'
DEFAULT_LOGIN_ROUTE = '/auth/steam/login'


class SteamLoginConfig:
    """
    Settings for the Steam login flow.
    @see SteamLoginConfigSchema
    """

    def __init__(self, return_route: str = DEFAULT_RETURN_ROUTE, login_route: str = DEFAULT_LOGIN_ROUTE,
                 method: str = METHOD_XML, api_key: str | None = None, site_root: str = '/',
                 verify_ssl: bool = True, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self.return_route = return_route
        self.login_route = login_route
        self.method = method
        self.api_key = api_key
        self.site_root = site_root
        # False reproduces the legacy behaviour of not validating Steam's certificates
        self.verify_ssl = verify_ssl
        self.timeout = timeout

    def __eq__(self, other):
        if isinstance(other, self.__class__):
            return self.__dict__ == other.__dict__
        else:
            return False


class SteamLoginConfigSchema(ma.Schema):
    return_route = ma.fields.String(load_default=DEFAULT_RETURN_ROUTE, allow_none=False)
    login_route = ma.fields.String(load_default=DEFAULT_LOGIN_ROUTE, allow_none=False)
    method = ma.fields.String(load_default=METHOD_XML, validate=ma.validate.OneOf([METHOD_XML, METHOD_API]))
    api_key = ma.fields.String(load_default=None, allow_none=True)
    site_root = ma.fields.String(load_default='/', allow_none=False)
    verify_ssl = ma.fields.Boolean(load_default=True)
    timeout = ma.fields.Float(load_default=DEFAULT_TIMEOUT_SECONDS, validate=ma.validate.Range(min=0, min_inclusive=False))

    class Meta:
        unknown = ma.EXCLUDE

    @post_load
    def make_config(self, data, **kwargs):
        return SteamLoginConfig(**data)


def load_config(settings: dict) -> SteamLoginConfig:
    try:
        return SteamLoginConfigSchema().load(settings or {})
    except ma.exceptions.ValidationError as e:
        raise ConfigurationException(f"Invalid steam login configuration: {e}") from None


def config_from_env(environ=None) -> SteamLoginConfig:
    """
    Build the configuration from environment variables:

        STEAM_LOGIN_RETURN_ROUTE, STEAM_LOGIN_LOGIN_ROUTE, STEAM_LOGIN_METHOD, STEAM_API_KEY,
        STEAM_LOGIN_SITE_ROOT, STEAM_LOGIN_VERIFY_SSL, STEAM_LOGIN_TIMEOUT
    """
    environ = os.environ if environ is None else environ
    env_keys = {
        'return_route': 'STEAM_LOGIN_RETURN_ROUTE',
        'login_route': 'STEAM_LOGIN_LOGIN_ROUTE',
        'method': 'STEAM_LOGIN_METHOD',
        'api_key': 'STEAM_API_KEY',
        'site_root': 'STEAM_LOGIN_SITE_ROOT',
        'verify_ssl': 'STEAM_LOGIN_VERIFY_SSL',
        'timeout': 'STEAM_LOGIN_TIMEOUT',
    }
    settings = {name: environ[key] for name, key in env_keys.items() if environ.get(key)}
    config = load_config(settings)
    if not config.verify_ssl:
        log.warning("TLS certificate validation is disabled for Steam requests")
    return config
