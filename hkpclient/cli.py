# hkp-lookup:
#   fetch, search for, or publish PGP keys on an HKP keyserver.
#
#   `get` takes key IDs on the command line (or one per line on stdin)
#   and emits a JSONL stream of keys, one armored key per record, in
#   the same shape as the rest of our key tooling consumes:
#     {"keyid": "...", "key": "-----BEGIN PGP PUBLIC KEY BLOCK-----..."}

import argparse
import json
import logging
import sys
from time import sleep

from hkpclient.client import KeyserverClient, UploadResult
from hkpclient.errors import KeyUnavailableError, MalformedInputError, TransportError


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hkp-lookup", description="Query or publish keys on an HKP keyserver."
    )
    parser.add_argument("--keyserver", help="keyserver hostname (default: $HKP_KEYSERVER)")
    parser.add_argument("--port", type=int, help="keyserver port (default: $HKP_PORT)")
    parser.add_argument("-v", "--verbose", action="store_true")
    commands = parser.add_subparsers(dest="command", required=True)

    get = commands.add_parser("get", help="fetch keys by ID")
    get.add_argument("keyids", nargs="*", metavar="KEYID")
    get.add_argument(
        "--delay", type=float, default=0.2, help="seconds to wait between lookups"
    )

    search = commands.add_parser("search", help="find the newest key for an e-mail address")
    search.add_argument("address")

    send = commands.add_parser("send", help="publish an armored public key")
    send.add_argument("keyfile", nargs="?", type=argparse.FileType("r"), default=sys.stdin)

    return parser


def _client(args: argparse.Namespace) -> KeyserverClient:
    return KeyserverClient.from_env(keyserver=args.keyserver, port=args.port)


def _get(client: KeyserverClient, keyids: list[str], delay: float) -> int:
    for n, keyid in enumerate(keyids):
        if n and delay:
            # No real rate limiting, just don't hammer the pool.
            sleep(delay)

        key = None
        try:
            key = client.get_by_id(keyid).armored()
            print(f"got key for {keyid}!", file=sys.stderr)
        except KeyUnavailableError:
            print(f"{client.keyserver}: no key found for ID: {keyid}", file=sys.stderr)

        print(json.dumps({"keyid": keyid, "key": key}))
    return 0


def _search(client: KeyserverClient, address: str) -> int:
    try:
        key = client.get_by_email(address)
    except KeyUnavailableError:
        print(f"{client.keyserver}: no key found for {address}", file=sys.stderr)
        return 1

    print(json.dumps({"address": address, "keyid": key.id, "key": key.armored()}))
    return 0


def _send(client: KeyserverClient, text: str) -> int:
    try:
        result = client.upload(text)
    except MalformedInputError as exc:
        print(f"barf: {exc}", file=sys.stderr)
        return 1

    if result is UploadResult.ALREADY_EXISTS:
        print(f"{client.keyserver}: key already present", file=sys.stderr)
    else:
        print(f"{client.keyserver}: uploaded", file=sys.stderr)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    client = _client(args)
    try:
        if args.command == "get":
            keyids = args.keyids or [line.strip() for line in sys.stdin if line.strip()]
            return _get(client, keyids, args.delay)
        elif args.command == "search":
            return _search(client, args.address)
        else:
            return _send(client, args.keyfile.read())
    except TransportError as exc:
        print(f"{client.keyserver}: {exc}", file=sys.stderr)
        return 1
