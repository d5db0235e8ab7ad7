"""
Steam OpenID 2.0 relying party: the checkid_setup redirect and the check_authentication round trip.
"""
from __future__ import annotations

import logging
import re
from types import MappingProxyType
from urllib.parse import urlencode, urljoin, urlsplit, urlunsplit, parse_qsl

import marshmallow as ma
import requests

from steamlogin.utils.exceptions import AuthenticationFailedException
from steamlogin.utils.http import http_post_form, DEFAULT_TIMEOUT_SECONDS

log = logging.getLogger(__name__)

provider_name = 'steamopenid'

STEAM_OPENID_URL = 'https://steamcommunity.com/openid/login'
OPENID_NS = 'http://specs.openid.net/auth/2.0'
IDENTIFIER_SELECT = OPENID_NS + '/identifier_select'

CLAIMED_ID_RE = re.compile(r'^https://steamcommunity\.com/openid/id/(\d{17,25})', re.ASCII)
IS_VALID_RE = re.compile(r'is_valid\s*:\s*true', re.IGNORECASE)

REQUIRED_FIELDS = ('assoc_handle', 'claimed_id', 'sig', 'signed')


class SteamOpenIDCallbackSchema(ma.Schema):
    assoc_handle = ma.fields.String(data_key='openid.assoc_handle', required=True, allow_none=False, validate=ma.validate.Length(min=1))
    claimed_id = ma.fields.String(data_key='openid.claimed_id', required=True, allow_none=False, validate=ma.validate.Length(min=1))
    sig = ma.fields.String(data_key='openid.sig', required=True, allow_none=False, validate=ma.validate.Length(min=1))
    signed = ma.fields.String(data_key='openid.signed', required=True, allow_none=False, validate=ma.validate.Length(min=1))

    class Meta:
        unknown = ma.INCLUDE


class CallbackParameters:
    """
    The openid.* fields of a provider callback, keyed by bare field name ('claimed_id', 'signed', ...),
    plus the optional post-login 'return' target.
    """

    def __init__(self, fields: dict, return_to: str | None = None):
        self._fields = MappingProxyType(dict(fields))
        self._return_to = return_to

    @classmethod
    def from_request_args(cls, args) -> CallbackParameters:
        '''accepts both 'openid.claimed_id' and the dot-mangled 'openid_claimed_id' spelling'''
        fields = {}
        return_to = None
        for key, value in args.items():
            if key == 'return':
                return_to = value
            elif key.startswith('openid.') or key.startswith('openid_'):
                fields[key[len('openid.'):]] = value
        return cls(fields, return_to=return_to)

    @property
    def fields(self):
        return self._fields

    @property
    def return_to(self) -> str | None:
        return self._return_to

    def get(self, name: str, default=None):
        if name in self._fields:
            return self._fields[name]
        # transports that mangle dots in parameter names turn 'ns.sreg' into 'ns_sreg'
        return self._fields.get(name.replace('.', '_'), default)

    def as_openid_dict(self) -> dict:
        return {f'openid.{k}': v for k, v in self._fields.items()}


class VerificationOutcome:
    def __init__(self, is_valid: bool, steam_id: str | None = None, reason: str | None = None):
        self.is_valid = is_valid
        self.steam_id = steam_id
        self.reason = reason

    @classmethod
    def valid(cls, steam_id: str) -> VerificationOutcome:
        return cls(True, steam_id=steam_id)

    @classmethod
    def invalid(cls, reason: str) -> VerificationOutcome:
        return cls(False, reason=reason)

    def __bool__(self):
        return self.is_valid

    def __repr__(self):
        if self.is_valid:
            return f"Valid({self.steam_id})"
        return f"Invalid({self.reason})"


def _append_query(url: str, **params) -> str:
    scheme, netloc, path, query, fragment = urlsplit(url)
    query_params = parse_qsl(query, keep_blank_values=True)
    query_params.extend(params.items())
    return urlunsplit((scheme, netloc, path, urlencode(query_params), fragment))


def build_redirect_url(return_to_base: str, realm: str, return_route: str, provider_url: str = STEAM_OPENID_URL) -> str:
    """
    URL to send the user to for signing in through Steam.

    return_to_base is where the user ends up after login, realm is this site's scheme and host, return_route
    the path (or absolute URL) of the callback route.
    """
    callback_url = urljoin(realm.rstrip('/') + '/', return_route)
    params = {
        'openid.ns': OPENID_NS,
        'openid.mode': 'checkid_setup',
        'openid.return_to': _append_query(callback_url, **{'return': return_to_base}),
        'openid.realm': realm,
        'openid.identity': IDENTIFIER_SELECT,
        'openid.claimed_id': IDENTIFIER_SELECT,
    }
    return f'{provider_url}?{urlencode(params)}'


def is_structurally_valid(params: CallbackParameters) -> bool:
    '''all of assoc_handle, claimed_id, sig and signed are present; an empty value counts as missing'''
    errors = SteamOpenIDCallbackSchema().validate(params.as_openid_dict())
    return not errors


def extract_steam_id(claimed_id: str | None) -> str | None:
    match = CLAIMED_ID_RE.match(claimed_id or '')
    if not match:
        return None
    return match.group(1)


def _strip_slashes(value: str) -> str:
    return re.sub(r'\\(.?)', r'\1', value, flags=re.DOTALL)


class SteamOpenIDValidator:
    def __init__(self, provider_url: str = STEAM_OPENID_URL, verify_ssl: bool = True,
                 timeout: float = DEFAULT_TIMEOUT_SECONDS, legacy_slash_escaping: bool = False):
        self.name = provider_name
        self.provider_url = provider_url
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self.legacy_slash_escaping = legacy_slash_escaping

    def _unescape(self, value: str) -> str:
        if self.legacy_slash_escaping:
            return _strip_slashes(value)
        return value

    def _build_check_authentication_payload(self, params: CallbackParameters) -> dict:
        payload = {}
        for field in params.get('signed').split(','):
            field = field.strip()
            value = params.get(field)
            if not field or value is None:
                continue
            payload[f'openid.{field}'] = self._unescape(value)
        payload['openid.assoc_handle'] = self._unescape(params.get('assoc_handle'))
        payload['openid.signed'] = self._unescape(params.get('signed'))
        payload['openid.sig'] = self._unescape(params.get('sig'))
        payload['openid.ns'] = OPENID_NS
        # must win over any 'mode' listed in 'signed'
        payload['openid.mode'] = 'check_authentication'
        return payload

    def verify(self, params: CallbackParameters) -> VerificationOutcome:
        '''re-submit the signed assertion to Steam and return the asserted SteamID64 if Steam confirms it'''
        if not is_structurally_valid(params):
            log.info(f'{self.name} callback is missing required fields',
                     extra=dict(fields=sorted(params.fields.keys())))
            return VerificationOutcome.invalid('Missing required OpenID fields')

        payload = self._build_check_authentication_payload(params)
        try:
            r = http_post_form(self.provider_url, payload, verify_ssl=self.verify_ssl, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            log.warning(f'{self.name} check_authentication request failed: {e}')
            return VerificationOutcome.invalid(f'Verification request failed: {e}')

        steam_id = extract_steam_id(params.get('claimed_id'))
        if not IS_VALID_RE.search(r.text or ''):
            log.warning(f'{self.name} assertion rejected', extra=dict(status_code=r.status_code, body=r.text))
            return VerificationOutcome.invalid('Assertion rejected by provider')
        if steam_id is None or not steam_id.isdigit():
            log.warning(f'{self.name} claimed_id has no SteamID64', extra=dict(claimed_id=params.get('claimed_id')))
            return VerificationOutcome.invalid('No SteamID64 in claimed_id')

        log.info(f'{self.name} identity authenticated: {steam_id}')
        return VerificationOutcome.valid(steam_id)

    def validate(self, params: CallbackParameters) -> str:
        outcome = self.verify(params)
        if not outcome.is_valid:
            raise AuthenticationFailedException('Steam Auth failed or timed out')
        return outcome.steam_id
