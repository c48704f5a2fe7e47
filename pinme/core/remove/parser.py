"""
Removal target parsing.

Accepts a content hash, a short alias, or the URLs pinme prints for them.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RemovalKind(str, Enum):
    """How the target is identified. Values are the query parameter style."""
    HASH = 'hash'
    SUBNAME = 'subname'


@dataclass(frozen=True)
class RemovalTarget:
    kind: RemovalKind
    value: str


# CIDv0: 'Qm' + 44 base58 characters
_CID_V0 = re.compile(r'Qm[1-9A-HJ-NP-Za-km-z]{44}')
# CIDv1 in base32 with the common multibase prefixes
_CID_V1 = (
    re.compile(r'bafy[a-z2-7]{50,}'),
    re.compile(r'bafk[a-z2-7]{50,}'),
    re.compile(r'bafybe[a-z2-7]{50,}'),
)
_SUBNAME = re.compile(r'[a-zA-Z0-9]{6,12}')

_HASH_URL = re.compile(r'https?://([a-z0-9]{50,})\.pinme\.dev', re.IGNORECASE)
_SUBNAME_URL = re.compile(r'https?://([a-zA-Z0-9]{6,12})\.pinit\.eth\.limo', re.IGNORECASE)


def is_valid_content_hash(value: str) -> bool:
    """Check value against the known CID shapes."""
    return bool(_CID_V0.fullmatch(value)) or any(p.fullmatch(value) for p in _CID_V1)


def is_valid_subname(value: str) -> bool:
    """Check value is 6-12 ASCII letters or digits."""
    return bool(_SUBNAME.fullmatch(value))


def parse_removal_input(raw: str) -> Optional[RemovalTarget]:
    """
    Recognize what the user asked to remove.

    Tried in order: preview URL ('https://<cid>.pinme.dev'), bare CID,
    alias URL ('https://<alias>.pinit.eth.limo'), bare alias.

    Args:
        raw: User input

    Returns:
        RemovalTarget, or None if nothing matched

    Example:
        >>> parse_removal_input("3abt6ztu")
        RemovalTarget(kind=<RemovalKind.SUBNAME: 'subname'>, value='3abt6ztu')
    """
    text = raw.strip()

    match = _HASH_URL.search(text)
    if match and is_valid_content_hash(match.group(1)):
        return RemovalTarget(RemovalKind.HASH, match.group(1))

    if is_valid_content_hash(text):
        return RemovalTarget(RemovalKind.HASH, text)

    match = _SUBNAME_URL.search(text)
    if match and is_valid_subname(match.group(1)):
        return RemovalTarget(RemovalKind.SUBNAME, match.group(1))

    if is_valid_subname(text):
        return RemovalTarget(RemovalKind.SUBNAME, text)

    return None
