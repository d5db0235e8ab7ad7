"""
Conversion between the three textual encodings of an individual Steam account:

    id64    76561197960287930
    id2     STEAM_0:0:11101
    id3     [U:1:22202]
"""
from __future__ import annotations

import re

from steamlogin.utils.exceptions import InvalidSteamIDException

STEAMID64_BASE = 76561197960265728

_STEAMID2_RE = re.compile(r'^STEAM_[0-5]:([01]):(\d+)$', re.ASCII)
_STEAMID3_RE = re.compile(r'^\[U:1:(\d+)\]$', re.ASCII)


class SteamIdentity:
    """
    One Steam account in all three encodings. id2 and id3 are derived from id64 and never set directly.
    """

    def __init__(self, id64: int):
        if id64 < STEAMID64_BASE:
            raise InvalidSteamIDException(f"SteamID64 {id64} is below the individual account base")
        if id64 >= 2 ** 64:
            raise InvalidSteamIDException(f"SteamID64 {id64} does not fit in 64 bits")
        self._id64 = id64

    @classmethod
    def from_id64(cls, id64: str | int) -> SteamIdentity:
        if isinstance(id64, bool):
            raise InvalidSteamIDException(f"Invalid SteamID64: {id64!r}")
        if isinstance(id64, str):
            if not (id64.isascii() and id64.isdigit()):
                raise InvalidSteamIDException(f"Invalid SteamID64: {id64!r}")
            id64 = int(id64)
        if not isinstance(id64, int):
            raise InvalidSteamIDException(f"Invalid SteamID64: {id64!r}")
        return cls(id64)

    @classmethod
    def from_parts(cls, account_number: int, parity: int) -> SteamIdentity:
        return cls(STEAMID64_BASE + account_number * 2 + parity)

    @classmethod
    def from_id2(cls, id2: str) -> SteamIdentity:
        match = _STEAMID2_RE.match(id2 or '')
        if not match:
            raise InvalidSteamIDException(f"Invalid SteamID: {id2!r}")
        return cls.from_parts(account_number=int(match.group(2)), parity=int(match.group(1)))

    @classmethod
    def from_id3(cls, id3: str) -> SteamIdentity:
        match = _STEAMID3_RE.match(id3 or '')
        if not match:
            raise InvalidSteamIDException(f"Invalid SteamID3: {id3!r}")
        z = int(match.group(1))
        return cls.from_parts(account_number=z // 2, parity=z & 1)

    @property
    def parity(self) -> int:
        return (self._id64 - STEAMID64_BASE) & 1

    @property
    def account_number(self) -> int:
        return (self._id64 - STEAMID64_BASE - self.parity) // 2

    @property
    def id64(self) -> str:
        return str(self._id64)

    @property
    def id2(self) -> str:
        return f"STEAM_0:{self.parity}:{self.account_number}"

    @property
    def id3(self) -> str:
        return f"[U:1:{self.account_number * 2 + self.parity}]"

    def __eq__(self, other):
        if isinstance(other, self.__class__):
            return self._id64 == other._id64
        else:
            return False

    def __hash__(self):
        return hash(self._id64)

    def __repr__(self):
        return f"SteamIdentity({self.id64}, {self.id2}, {self.id3})"


def derive_identity(id64: str | int) -> SteamIdentity:
    return SteamIdentity.from_id64(id64)
