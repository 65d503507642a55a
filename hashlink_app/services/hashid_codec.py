"""
Reversible obfuscation of link IDs.

Auto-generated short links are the primary key encoded with hashids,
salted with the service host. Because the encoding is reversible, a token
from a short link can be turned straight back into a primary key without
storing it anywhere.
"""

from functools import lru_cache
from typing import Optional, Tuple

from hashids import Hashids

from hashlink_app.config import settings


class HashIdCodec:
    """
    Thin wrapper around Hashids for single integer IDs.

    Pros: No collisions, no DB round trip, stable for a given salt
    Cons: Changing the salt (service host) invalidates every issued link
    """

    def __init__(self, salt: str, min_length: int = 0, alphabet: Optional[str] = None):
        self.salt = salt
        self.min_length = min_length
        if alphabet:
            self._hashids = Hashids(salt=salt, min_length=min_length, alphabet=alphabet)
        else:
            self._hashids = Hashids(salt=salt, min_length=min_length)

    def encode(self, link_id: int) -> str:
        """Encode a primary key as a hash id"""
        if link_id is None or link_id < 0:
            raise ValueError(f"Cannot encode link id {link_id!r}")
        return self._hashids.encode(link_id)

    def decode(self, token: str) -> Tuple[int, ...]:
        """
        Decode a token back to the numbers it encodes.

        Returns an empty tuple when the token is not something this codec
        could have produced (wrong alphabet, wrong salt, tampered).
        """
        if not token:
            return ()
        return self._hashids.decode(token)

    def decode_id(self, token: str) -> Optional[int]:
        """Decode a token to a single primary key, or None"""
        ids = self.decode(token)
        return ids[0] if ids else None

    def is_hash_id(self, token: str) -> bool:
        """True if the token collides with the auto-generated id space"""
        return bool(self.decode(token))


@lru_cache()
def get_hashid_codec() -> HashIdCodec:
    """
    Get the process-wide codec (singleton).

    Salt is the service host, minimum length matches the custom hash
    minimum length so both kinds of link look alike.
    """
    return HashIdCodec(
        salt=settings.service_host,
        min_length=settings.hash_min_length,
        alphabet=settings.hashid_alphabet,
    )
