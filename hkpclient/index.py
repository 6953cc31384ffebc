# index:
#   parse the machine-readable ("options=mr") output of an HKP
#   `op=index` search and pick the key that best answers it.
#
#   the format is line oriented:
#     pub:<keyid>:<algo>:<keylen>:<created>:<expires>:<flags>
#     uid:<escaped uid>:<created>:<expires>:<flags>
#   where each uid line belongs to the pub line above it.

from dataclasses import dataclass, field
import logging
import re
import time
from urllib.parse import unquote

logger = logging.getLogger(__name__)

_PUB_FIELD_COUNT = 7
_EMAIL_RE = re.compile(r"<([^>]+)>")


@dataclass
class IndexEntry:
    key_id: str
    created: str
    expires: int | None = None
    uids: list[str] = field(default_factory=list)


def _parse_pub(line: str, now: float) -> IndexEntry | None:
    fields = line.split(":")
    if len(fields) != _PUB_FIELD_COUNT:
        logger.debug("ignoring malformed pub line: %r", line)
        return None

    expires = None
    # Empty and "0" both mean the key never expires.
    if fields[5] and fields[5] != "0":
        try:
            expires = int(fields[5])
        except ValueError:
            logger.debug("ignoring pub line with bad expiration: %r", line)
            return None
        if expires <= now:
            logger.debug("ignoring expired key %s", fields[1])
            return None

    return IndexEntry(key_id=fields[1], created=fields[4], expires=expires)


def _uid_email(line: str) -> str | None:
    # mr output percent-escapes the uid, so "<" usually arrives as "%3C".
    match = _EMAIL_RE.search(unquote(line))
    if match is None:
        return None
    return match.group(1)


def parse_index(text: str, now: float | None = None) -> list[IndexEntry]:
    """
    Returns the unexpired keys listed in `text`, in the order the keyserver
    sent them, each with the e-mail addresses found in its uid lines.
    """
    if now is None:
        now = time.time()

    entries: list[IndexEntry] = []
    current = None
    for line in text.splitlines():
        if line.startswith("pub:"):
            current = _parse_pub(line, now)
            if current is not None:
                entries.append(current)
        elif current is not None and line.startswith("uid:"):
            email = _uid_email(line)
            if email is not None:
                current.uids.append(email)

    return entries


def _age(entry: IndexEntry) -> tuple:
    # Creation stamps are epoch seconds; anything else sorts after them, as text.
    if entry.created.isdigit():
        return (0, int(entry.created), "", entry.key_id)
    return (1, 0, entry.created, entry.key_id)


def select_newest(entries: list[IndexEntry], address: str) -> IndexEntry | None:
    """
    Returns the most recently created entry with a uid exactly matching
    `address`, or None if there isn't one.
    """
    matching = [entry for entry in entries if address in entry.uids]
    if not matching:
        return None
    return sorted(matching, key=_age)[-1]
