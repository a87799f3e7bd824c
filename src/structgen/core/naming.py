"""Identifier casing for generated struct and field names.

Column and table names are split into words on separator characters (anything
that is not a letter or decimal digit), on lower-to-upper case transitions and
on digit-to-letter transitions. The first letter of every word is
capitalized and the rest is kept as is:

    user_id      -> UserId
    createdAt    -> CreatedAt
    ipv4address  -> Ipv4Address
    HTTPStatus   -> HTTPStatus

The result must be an exported Go identifier, so it has to start with an
upper-case letter; otherwise IDENTIFIER_PREFIX is prepended. Go keywords and
predeclared identifiers are all lower-case, so an exported name never
collides with them.
"""

from __future__ import annotations

IDENTIFIER_PREFIX = "X"


def _is_word_char(ch: str) -> bool:
    return ch.isalpha() or ch.isdecimal()


def _is_boundary(prev: str, ch: str) -> bool:
    return (prev.islower() and ch.isupper()) or (prev.isdecimal() and ch.isalpha())


def split_words(name: str) -> list[str]:
    """Split a catalog name into the words used to build an identifier."""
    words: list[str] = []
    current = ""
    for ch in name:
        if not _is_word_char(ch):
            if current:
                words.append(current)
            current = ""
            continue
        if current and _is_boundary(current[-1], ch):
            words.append(current)
            current = ""
        current += ch
    if current:
        words.append(current)
    return words


def to_identifier(name: str) -> str:
    """
    Convert a catalog column or table name into an exported Go identifier.

    The transform is pure and deterministic and never returns an empty
    string.

    Args:
        name: Column or table name as stored in the catalog.

    Returns:
        The identifier, e.g. ``"UserId"`` for ``"user_id"``.
    """
    ident = "".join(word[:1].upper() + word[1:] for word in split_words(name))
    if not ident or not (ident[0].isalpha() and ident[0].isupper()):
        ident = IDENTIFIER_PREFIX + ident
    return ident
