"""
Profile data for a signed in player, from either the community XML profile page or the Web API
GetPlayerSummaries endpoint. Both sources produce the same ProfileRecord.
"""
from __future__ import annotations

import datetime
import logging
import xml.etree.ElementTree as ET

import marshmallow as ma
import requests
from marshmallow import Schema, fields

from steamlogin.config import METHOD_API, METHOD_XML
from steamlogin.steamid import SteamIdentity
from steamlogin.utils.exceptions import ConfigurationException, UpstreamFetchException
from steamlogin.utils.http import http_get, DEFAULT_TIMEOUT_SECONDS

log = logging.getLogger(__name__)

STEAM_PROFILE_URL = 'https://steamcommunity.com/profiles/{}'
STEAM_CUSTOM_URL = 'https://steamcommunity.com/id/{}'
STEAM_API_PLAYER_SUMMARIES_URL = 'https://api.steampowered.com/ISteamUser/GetPlayerSummaries/v0002/'

PERSONA_STATES = {
    0: 'Offline',
    1: 'Online',
    2: 'Busy',
    3: 'Away',
    4: 'Snooze',
    5: 'Looking to trade',
    6: 'Looking to play',
}

PRIVATE_VISIBILITY_STATES = (1, 2)

# independent of the process locale
MONTH_NAMES = (
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December',
)


class ProfileRecord:
    """
    Normalized profile attributes of a Steam account.
    @see ProfileRecordSchema
    """

    def __init__(self, name: str, player_state: str, state_message: str, privacy_state: str,
                 visibility_state: int, avatar_small: str, avatar_medium: str, avatar_large: str,
                 profile_url: str, real_name: str | None = None, joined: str | None = None):
        self.name = name
        self.real_name = real_name
        self.player_state = player_state
        self.state_message = state_message
        self.privacy_state = privacy_state
        self.visibility_state = visibility_state
        self.avatar_small = avatar_small
        self.avatar_medium = avatar_medium
        self.avatar_large = avatar_large
        self.profile_url = profile_url
        self.joined = joined

    def __eq__(self, other):
        if isinstance(other, self.__class__):
            return self.__dict__ == other.__dict__
        else:
            return False

    def __repr__(self):
        return f"ProfileRecord({self.name!r}, {self.profile_url!r})"


class ProfileRecordSchema(Schema):
    name = fields.Str()
    real_name = fields.Str(data_key='realName', allow_none=True)
    player_state = fields.Str(data_key='playerState')
    state_message = fields.Str(data_key='stateMessage')
    privacy_state = fields.Str(data_key='privacyState')
    visibility_state = fields.Int(data_key='visibilityState')
    avatar_small = fields.Str(data_key='avatarSmall')
    avatar_medium = fields.Str(data_key='avatarMedium')
    avatar_large = fields.Str(data_key='avatarLarge')
    profile_url = fields.Str(data_key='profileURL')
    joined = fields.Str(allow_none=True)


class SteamPlayer:
    """
    A signed in player: the identity is always known, the profile is None when enrichment failed.
    """

    def __init__(self, identity: SteamIdentity, profile: ProfileRecord | None = None, profile_error: str | None = None):
        self.identity = identity
        self.profile = profile
        self.profile_error = profile_error

    @property
    def steam_id(self) -> str:
        return self.identity.id64


def _ucfirst(value: str) -> str:
    return value[:1].upper() + value[1:]


def _ordinal_suffix(day: int) -> str:
    if 11 <= day % 100 <= 13:
        return 'th'
    return {1: 'st', 2: 'nd', 3: 'rd'}.get(day % 10, 'th')


def format_join_date(timestamp: int) -> str:
    '''unix timestamp to e.g. "September 12th, 2003" (UTC)'''
    date = datetime.datetime.fromtimestamp(timestamp, tz=datetime.timezone.utc)
    return f"{MONTH_NAMES[date.month - 1]} {date.day}{_ordinal_suffix(date.day)}, {date.year}"


def persona_state_label(persona_state: int) -> str:
    try:
        return PERSONA_STATES[persona_state]
    except KeyError:
        raise UpstreamFetchException(f"Unknown personastate: {persona_state!r}") from None


class ProfilePageSource:
    """
    The public community profile rendered as XML (?xml=1).
    """
    name = METHOD_XML

    def __init__(self, verify_ssl: bool = True, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self.verify_ssl = verify_ssl
        self.timeout = timeout

    def _get_document(self, identity: SteamIdentity) -> ET.Element:
        url = STEAM_PROFILE_URL.format(identity.id64) + '/'
        try:
            r = http_get(url, params={'xml': 1}, verify_ssl=self.verify_ssl, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise UpstreamFetchException(f"Failed to fetch steam profile: {e}") from e
        try:
            return ET.fromstring(r.content)
        except ET.ParseError as e:
            raise UpstreamFetchException(f"Steam profile is not valid XML: {e}") from None

    def fetch(self, identity: SteamIdentity) -> ProfileRecord:
        doc = self._get_document(identity)
        error = doc.findtext('error')
        if error is not None:
            raise UpstreamFetchException(f"Steam profile error: {error.strip()}")
        if doc.find('steamID') is None:
            raise UpstreamFetchException("Steam profile is missing the steamID element")

        def text(tag):
            return (doc.findtext(tag) or '').strip()

        try:
            visibility_state = int(text('visibilityState') or 0)
        except ValueError:
            raise UpstreamFetchException(f"Invalid visibilityState: {text('visibilityState')!r}") from None

        custom_url = text('customURL')
        if custom_url:
            profile_url = STEAM_CUSTOM_URL.format(custom_url)
        else:
            profile_url = STEAM_PROFILE_URL.format(identity.id64)

        return ProfileRecord(
            name=text('steamID'),
            real_name=text('realname') or None,
            player_state=_ucfirst(text('onlineState')),
            state_message=text('stateMessage'),
            privacy_state=_ucfirst(text('privacyState')),
            visibility_state=visibility_state,
            avatar_small=text('avatarIcon'),
            avatar_medium=text('avatarMedium'),
            avatar_large=text('avatarFull'),
            profile_url=profile_url,
            # older feeds call it 'joined', current ones 'memberSince'
            joined=text('joined') or text('memberSince') or None,
        )


class PlayerSummarySchema(ma.Schema):
    personaname = ma.fields.String(required=True)
    realname = ma.fields.String(load_default=None)
    personastate = ma.fields.Integer(required=True, validate=ma.validate.OneOf(list(PERSONA_STATES)))
    communityvisibilitystate = ma.fields.Integer(required=True)
    avatar = ma.fields.String(required=True)
    avatarmedium = ma.fields.String(required=True)
    avatarfull = ma.fields.String(required=True)
    profileurl = ma.fields.String(required=True)
    timecreated = ma.fields.Integer(load_default=None)

    class Meta:
        unknown = ma.EXCLUDE


class WebAPISource:
    """
    ISteamUser/GetPlayerSummaries, requires a Web API key.
    """
    name = METHOD_API

    def __init__(self, api_key: str | None, verify_ssl: bool = True, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        if not api_key:
            raise ConfigurationException("Steam API key not specified")
        self.api_key = api_key
        self.verify_ssl = verify_ssl
        self.timeout = timeout

    def _get_player_summary(self, identity: SteamIdentity) -> dict:
        params = {'key': self.api_key, 'steamids': identity.id64}
        try:
            r = http_get(STEAM_API_PLAYER_SUMMARIES_URL, params=params, verify_ssl=self.verify_ssl, timeout=self.timeout)
            players = r.json()['response']['players']
        except requests.exceptions.RequestException as e:
            raise UpstreamFetchException(f"Failed to fetch player summary: {e}") from e
        except (ValueError, KeyError, TypeError) as e:
            raise UpstreamFetchException(f"Unexpected player summary response: {e}") from None
        if not isinstance(players, list) or not players:
            raise UpstreamFetchException(f"No player summary for {identity.id64}")
        try:
            return PlayerSummarySchema().load(players[0])
        except ma.exceptions.ValidationError as e:
            raise UpstreamFetchException(f"Invalid player summary: {e}") from None

    def fetch(self, identity: SteamIdentity) -> ProfileRecord:
        data = self._get_player_summary(identity)
        persona_state = data['personastate']
        visibility_state = data['communityvisibilitystate']
        timecreated = data['timecreated']
        return ProfileRecord(
            name=data['personaname'],
            real_name=data['realname'],
            player_state='Online' if persona_state != 0 else 'Offline',
            state_message=persona_state_label(persona_state),
            privacy_state='Private' if visibility_state in PRIVATE_VISIBILITY_STATES else 'Public',
            visibility_state=visibility_state,
            avatar_small=data['avatar'],
            avatar_medium=data['avatarmedium'],
            avatar_large=data['avatarfull'],
            profile_url=data['profileurl'].replace('http://', 'https://', 1),
            joined=format_join_date(timecreated) if timecreated is not None else None,
        )


def make_source(source: str, api_key: str | None = None, verify_ssl: bool = True, timeout: float = DEFAULT_TIMEOUT_SECONDS):
    if source == METHOD_XML:
        return ProfilePageSource(verify_ssl=verify_ssl, timeout=timeout)
    if source == METHOD_API:
        return WebAPISource(api_key, verify_ssl=verify_ssl, timeout=timeout)
    raise ConfigurationException(f"Unknown steam profile source: {source!r}")


def fetch_profile(id64: str | int, source: str, api_key: str | None = None, verify_ssl: bool = True,
                  timeout: float = DEFAULT_TIMEOUT_SECONDS) -> ProfileRecord:
    identity = SteamIdentity.from_id64(id64)
    return make_source(source, api_key=api_key, verify_ssl=verify_ssl, timeout=timeout).fetch(identity)


def resolve_player(id64: str | int, source: str, api_key: str | None = None, verify_ssl: bool = True,
                   timeout: float = DEFAULT_TIMEOUT_SECONDS) -> SteamPlayer:
    """
    Identity plus profile. A failed profile fetch still returns the identity, with profile set to None.
    """
    identity = SteamIdentity.from_id64(id64)
    profile_source = make_source(source, api_key=api_key, verify_ssl=verify_ssl, timeout=timeout)
    try:
        profile = profile_source.fetch(identity)
    except UpstreamFetchException as e:
        log.warning(f"Steam profile for {identity.id64} unavailable: {e.msg}", extra=dict(source=profile_source.name))
        return SteamPlayer(identity, profile_error=e.msg)
    return SteamPlayer(identity, profile=profile)
