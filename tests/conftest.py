import pgpy
import pytest
import requests
from pgpy.constants import (
    CompressionAlgorithm,
    HashAlgorithm,
    KeyFlags,
    PubKeyAlgorithm,
    SymmetricKeyAlgorithm,
)


class FakeResponse:
    def __init__(self, text: str = "", status_code: int = 200):
        self.text = text
        self.status_code = status_code

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """
    Stands in for requests.Session: hands out the queued responses in order
    and records every call. Queued exceptions are raised instead.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[dict] = []

    def _next(self):
        resp = self.responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp

    def get(self, url, **kwargs):
        self.calls.append({"method": "GET", "url": url})
        return self._next()

    def post(self, url, data=None, headers=None, **kwargs):
        self.calls.append({"method": "POST", "url": url, "data": data, "headers": headers})
        return self._next()


def _new_key(name: str, email: str) -> pgpy.PGPKey:
    key = pgpy.PGPKey.new(PubKeyAlgorithm.RSAEncryptOrSign, 2048)
    uid = pgpy.PGPUID.new(name, email=email)
    key.add_uid(
        uid,
        usage={KeyFlags.Sign, KeyFlags.Certify},
        hashes=[HashAlgorithm.SHA256],
        ciphers=[SymmetricKeyAlgorithm.AES256],
        compression=[CompressionAlgorithm.ZLIB],
    )
    return key


@pytest.fixture(scope="session")
def private_key() -> pgpy.PGPKey:
    return _new_key("Alice Example", "alice@example.com")


@pytest.fixture(scope="session")
def armored_key(private_key) -> str:
    return str(private_key.pubkey)


@pytest.fixture(scope="session")
def armored_private_key(private_key) -> str:
    return str(private_key)
