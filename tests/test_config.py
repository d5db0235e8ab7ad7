import unittest

from steamlogin.config import SteamLoginConfig, load_config, config_from_env
from steamlogin.utils.exceptions import ConfigurationException


class TestLoadConfig(unittest.TestCase):
    def test_defaults(self):
        config = load_config({})
        self.assertEqual(config, SteamLoginConfig())
        self.assertEqual(config.method, 'xml')
        self.assertTrue(config.verify_ssl)
        self.assertEqual(config.timeout, 10)
        self.assertIsNone(config.api_key)

    def test_values(self):
        config = load_config(dict(method='api', api_key='KEY', verify_ssl=False, timeout=2.5, unknown_setting=1))
        self.assertEqual(config.method, 'api')
        self.assertEqual(config.api_key, 'KEY')
        self.assertFalse(config.verify_ssl)
        self.assertEqual(config.timeout, 2.5)

    def test_invalid(self):
        for settings in [dict(method='html'), dict(timeout=0), dict(timeout='soon'), dict(verify_ssl='maybe')]:
            with self.assertRaises(ConfigurationException):
                load_config(settings)


class TestConfigFromEnv(unittest.TestCase):
    def test_from_env(self):
        config = config_from_env({
            'STEAM_LOGIN_METHOD': 'api',
            'STEAM_API_KEY': 'KEY',
            'STEAM_LOGIN_RETURN_ROUTE': '/steam/return',
            'STEAM_LOGIN_VERIFY_SSL': 'false',
            'STEAM_LOGIN_TIMEOUT': '5',
            'STEAM_LOGIN_SITE_ROOT': '',
        })
        self.assertEqual(config.method, 'api')
        self.assertEqual(config.api_key, 'KEY')
        self.assertEqual(config.return_route, '/steam/return')
        self.assertFalse(config.verify_ssl)
        self.assertEqual(config.timeout, 5)
        self.assertEqual(config.site_root, '/')

    def test_empty_env(self):
        self.assertEqual(config_from_env({}), SteamLoginConfig())
