from .openid import (
    CallbackParameters,
    SteamOpenIDValidator,
    VerificationOutcome,
    build_redirect_url,
    is_structurally_valid,
)
