"""
Login with Steam (OpenID 2.0) for web applications.
"""
from steamlogin.auth.openid import CallbackParameters, SteamOpenIDValidator, VerificationOutcome, build_redirect_url
from steamlogin.config import SteamLoginConfig, load_config, config_from_env
from steamlogin.login import SteamLogin, button
from steamlogin.profile import ProfileRecord, SteamPlayer, fetch_profile, resolve_player
from steamlogin.steamid import SteamIdentity, derive_identity
