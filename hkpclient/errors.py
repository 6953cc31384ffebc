# errors:
#   everything the keyserver client raises derives from KeyserverError,
#   so callers that don't care about the distinction can catch just that.


class KeyserverError(Exception):
    pass


class TransportError(KeyserverError):
    """
    The HTTP round-trip itself failed: no connection, a timeout, or a status
    the keyserver only sends when something is wrong on its side.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class KeyUnavailableError(KeyserverError):
    """
    The keyserver answered, but not with a key we could use.
    """

    def __init__(self, message: str = "Could not obtain public key from the keyserver.") -> None:
        super().__init__(message)


class KeyExistsError(KeyserverError):
    def __init__(self, message: str = "Key already exists on the public keyserver.") -> None:
        super().__init__(message)


class MalformedInputError(KeyserverError):
    pass
