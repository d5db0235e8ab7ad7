"""
Flask routes for Login with Steam: a login route redirecting to Steam and the OpenID callback route.
"""
import logging

from flask import Blueprint, redirect, request
from werkzeug.exceptions import Unauthorized

from steamlogin.auth.openid import CallbackParameters
from steamlogin.login import SteamLogin
from steamlogin.utils.exceptions import AuthenticationFailedException

log = logging.getLogger(__name__)


def _return_target():
    return_to = request.args.get('return')
    if return_to:
        return return_to
    # the page that sent the user here, unless that is the login route itself
    if request.referrer and request.referrer != request.url:
        return request.referrer
    return None


def make_blueprint(steam_login: SteamLogin, on_login, name='steamlogin'):
    '''on_login(player) is called with the SteamPlayer of every successful login'''
    bp = Blueprint(name, __name__)
    config = steam_login.config

    @bp.route(config.login_route, endpoint='login')
    def login():
        realm = request.host_url.rstrip('/')
        return redirect(steam_login.login_url(realm, _return_target()))

    @bp.route(config.return_route, endpoint='callback', methods=['GET', 'POST'])
    def callback():
        params = CallbackParameters.from_request_args(request.values)
        try:
            player = steam_login.validate(params)
        except AuthenticationFailedException as e:
            log.warning(f"Steam login failed: {e.msg}", extra=dict(remote_addr=request.remote_addr))
            raise Unauthorized(description=e.msg)
        on_login(player)
        return redirect(steam_login.return_url(params))

    return bp
