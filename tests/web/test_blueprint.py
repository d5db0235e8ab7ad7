import unittest
from unittest import mock
from urllib.parse import urlsplit, parse_qs

from flask import Flask

from steamlogin.auth.openid import STEAM_OPENID_URL
from steamlogin.config import load_config
from steamlogin.flask import make_blueprint
from steamlogin.login import SteamLogin
from steamlogin.utils.exceptions import AuthenticationFailedException

STEAM_ID = '76561197960287930'


class TestSteamLoginBlueprint(unittest.TestCase):
    def setUp(self):
        self.logins = []
        self.steam_login = SteamLogin(load_config(dict(site_root='/')))
        app = Flask(__name__)
        app.register_blueprint(make_blueprint(self.steam_login, self.logins.append))
        self.client = app.test_client()

    def test_login_redirects_to_steam(self):
        r = self.client.get('/auth/steam/login', headers={'Referer': 'http://localhost/store'})
        self.assertEqual(r.status_code, 302)
        location = r.headers['Location']
        self.assertTrue(location.startswith(STEAM_OPENID_URL + '?'))
        query = parse_qs(urlsplit(location).query)
        self.assertEqual(query['openid.realm'], ['http://localhost'])
        self.assertEqual(query['openid.return_to'], ['http://localhost/auth/steam/callback?return=http%3A%2F%2Flocalhost%2Fstore'])

    def test_login_without_referrer(self):
        r = self.client.get('/auth/steam/login')
        query = parse_qs(urlsplit(r.headers['Location']).query)
        self.assertEqual(query['openid.return_to'], ['http://localhost/auth/steam/callback?return=%2F'])

    def test_callback(self):
        with mock.patch.object(self.steam_login, 'validate') as validate:
            r = self.client.get('/auth/steam/callback', query_string={
                'return': '/store',
                'openid.claimed_id': f'https://steamcommunity.com/openid/id/{STEAM_ID}',
            })
        self.assertEqual(r.status_code, 302)
        self.assertTrue(r.headers['Location'].endswith('/store'))
        self.assertEqual(self.logins, [validate.return_value])
        params = validate.call_args[0][0]
        self.assertEqual(params.get('claimed_id'), f'https://steamcommunity.com/openid/id/{STEAM_ID}')
        self.assertEqual(params.return_to, '/store')

    def test_callback_unauthorized(self):
        with mock.patch.object(self.steam_login, 'validate') as validate:
            validate.side_effect = AuthenticationFailedException('Steam Auth failed or timed out')
            r = self.client.get('/auth/steam/callback')
        self.assertEqual(r.status_code, 401)
        self.assertEqual(self.logins, [])
