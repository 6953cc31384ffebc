import pytest

from hkpclient.errors import (
    KeyExistsError,
    KeyserverError,
    KeyUnavailableError,
    MalformedInputError,
    TransportError,
)


def test_all_errors_are_keyserver_errors():
    for exc in (TransportError, KeyUnavailableError, KeyExistsError, MalformedInputError):
        assert issubclass(exc, KeyserverError)


def test_transport_error_status_code():
    assert TransportError("boom", status_code=500).status_code == 500
    assert TransportError("boom").status_code is None


def test_fixed_messages():
    assert str(KeyUnavailableError()) == "Could not obtain public key from the keyserver."
    assert str(KeyExistsError()) == "Key already exists on the public keyserver."


def test_catch_as_keyserver_error():
    with pytest.raises(KeyserverError):
        raise KeyExistsError()
