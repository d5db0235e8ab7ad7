from __future__ import annotations

import logging
from urllib.parse import urlsplit

from steamlogin.auth.openid import CallbackParameters, SteamOpenIDValidator, build_redirect_url, STEAM_OPENID_URL
from steamlogin.config import SteamLoginConfig, METHOD_API
from steamlogin.profile import SteamPlayer, resolve_player
from steamlogin.utils.exceptions import AuthenticationFailedException, ConfigurationException, InvalidSteamIDException

log = logging.getLogger(__name__)

BUTTON_URL = 'https://steamcommunity-a.akamaihd.net/public/images/signinthroughsteam/sits_0{}.png'


def button(kind: str = 'small') -> str:
    '''URL of one of the two stock "Sign in through Steam" images'''
    return BUTTON_URL.format(1 if kind == 'small' else 2)


class SteamLogin:
    """
    Login with Steam for one site: redirect URL, callback validation and player lookup.
    """

    def __init__(self, config: SteamLoginConfig, provider_url: str = STEAM_OPENID_URL):
        if config.method == METHOD_API and not config.api_key:
            raise ConfigurationException("Steam API key not specified")
        self.config = config
        self.validator = SteamOpenIDValidator(provider_url=provider_url, verify_ssl=config.verify_ssl,
                                              timeout=config.timeout)
        self.provider_url = provider_url

    def login_url(self, realm: str, return_to: str | None = None) -> str:
        return build_redirect_url(return_to or self.config.site_root, realm, self.config.return_route,
                                  provider_url=self.provider_url)

    def _is_own_url(self, url: str) -> bool:
        if '\\' in url:
            return False
        target = urlsplit(url)
        if not target.scheme and not target.netloc:
            return url.startswith('/')
        site = urlsplit(self.config.site_root)
        return target.scheme in ('http', 'https') and bool(site.netloc) and target.netloc == site.netloc

    def return_url(self, params: CallbackParameters) -> str:
        '''where to send the user after login: a path or a URL on the site's own host, never the callback route itself'''
        return_to = params.return_to
        if return_to and return_to != self.config.return_route and self._is_own_url(return_to):
            return return_to
        if return_to:
            log.info(f"Ignoring post-login redirect target {return_to!r}")
        return self.config.site_root

    def validate(self, params: CallbackParameters) -> SteamPlayer:
        steam_id = self.validator.validate(params)
        try:
            player = resolve_player(steam_id, self.config.method, api_key=self.config.api_key,
                                    verify_ssl=self.config.verify_ssl, timeout=self.config.timeout)
        except InvalidSteamIDException as e:
            log.warning(f"Steam asserted an unusable SteamID64: {e.msg}")
            raise AuthenticationFailedException('Steam Auth failed or timed out') from None
        log.info(f"Steam login succeeded for {player.identity.id64}",
                 extra=dict(steamid2=player.identity.id2, steamid3=player.identity.id3))
        return player

    button = staticmethod(button)
