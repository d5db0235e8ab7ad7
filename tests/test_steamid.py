import unittest

from steamlogin.steamid import SteamIdentity, derive_identity, STEAMID64_BASE
from steamlogin.utils.exceptions import InvalidSteamIDException


class TestSteamIdentity(unittest.TestCase):
    def test_known_account(self):
        identity = derive_identity('76561197960287930')
        self.assertEqual(identity.id64, '76561197960287930')
        self.assertEqual(identity.id2, 'STEAM_0:0:11101')
        self.assertEqual(identity.id3, '[U:1:22202]')
        self.assertEqual(identity.parity, 0)
        self.assertEqual(identity.account_number, 11101)

    def test_odd_parity(self):
        identity = derive_identity('76561197960287931')
        self.assertEqual(identity.id2, 'STEAM_0:1:11101')
        self.assertEqual(identity.id3, '[U:1:22203]')

    def test_base_offset(self):
        identity = derive_identity(STEAMID64_BASE)
        self.assertEqual(identity.id2, 'STEAM_0:0:0')
        self.assertEqual(identity.id3, '[U:1:0]')

    def test_large_ids_are_exact(self):
        # values that do not survive a round trip through a float
        for id64 in ['76561198999999999', '76561202255233023', '76561197960265729']:
            identity = derive_identity(id64)
            self.assertEqual(SteamIdentity.from_id2(identity.id2).id64, id64)
            self.assertEqual(SteamIdentity.from_id3(identity.id3).id64, id64)

    def test_round_trip(self):
        for offset in range(0, 5000, 7):
            id64 = str(STEAMID64_BASE + offset * 104729)
            identity = derive_identity(id64)
            self.assertEqual(identity, derive_identity(id64))
            self.assertEqual(SteamIdentity.from_id2(identity.id2).id64, id64)
            self.assertEqual(SteamIdentity.from_id3(identity.id3).id64, id64)
            self.assertEqual(SteamIdentity.from_parts(identity.account_number, identity.parity).id64, id64)

    def test_accepts_int(self):
        self.assertEqual(derive_identity(76561197960287930), derive_identity('76561197960287930'))

    def test_rejects_invalid_id64(self):
        for id64 in ['', 'abc', '-76561197960287930', '7656119796028793x', '76561197960265727', '0',
                     '7656119796028793\u00b2', '\u0667\u0666\u0665\u0666\u0661\u0661\u0669\u0667\u0669\u0666\u0660\u0662\u0668\u0667\u0669\u0663\u0660',
                     str(2 ** 64), None, 1.5, True]:
            with self.assertRaises(InvalidSteamIDException):
                derive_identity(id64)

    def test_rejects_invalid_id2_and_id3(self):
        for id2 in ['', 'STEAM_0:2:11101', 'STEAM_0:0:\u0661\u0661\u0661', 'STEAM_0:0:', 'U:1:22202', None]:
            with self.assertRaises(InvalidSteamIDException):
                SteamIdentity.from_id2(id2)
        for id3 in ['', '[U:1:]', '[G:1:22202]', 'STEAM_0:0:11101', None]:
            with self.assertRaises(InvalidSteamIDException):
                SteamIdentity.from_id3(id3)
