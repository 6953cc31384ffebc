# keys:
#   a thin wrapper around pgpy's key type, exposing only what the
#   keyserver protocol needs: an ID to look the key up by and an
#   armored rendering to upload.

import pgpy

from hkpclient.errors import MalformedInputError


class PublicKey:
    def __init__(self, key: pgpy.PGPKey):
        self._key = key

    def __repr__(self) -> str:
        return f"<PublicKey {self.id}>"

    def __str__(self) -> str:
        return self.armored()

    @property
    def id(self) -> str:
        """
        Returns the 16 hex character ID of the primary key.
        """
        return self._key.fingerprint.keyid

    @property
    def fingerprint(self) -> str:
        return str(self._key.fingerprint).replace(" ", "")

    @property
    def emails(self) -> list[str]:
        return [uid.email for uid in self._key.userids if uid.email]

    def armored(self) -> str:
        return str(self._key)


def parse(text: str | bytes) -> PublicKey:
    try:
        key, _ = pgpy.PGPKey.from_blob(text)
    except Exception as exc:
        # pgpy has no single error type for "this isn't a key": depending on
        # how far it gets we see ValueError, PGPError, TypeError, ...
        raise MalformedInputError(f"not a PGP key: {exc}") from exc

    if not key.is_public:
        raise MalformedInputError("expected a public key, got a private key")

    return PublicKey(key)
