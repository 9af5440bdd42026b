import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from . import MAX_SPECIES_ID
from .errors import ParseError

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".gif")
ALT_SUFFIX_RE = re.compile(r"[a-zA-Z]+$")
SPECIES_ID_RE = re.compile(r"[1-9][0-9]*")


class SpriteCategory(Enum):
    BASE = "base"
    CUSTOM = "custom"
    AUTOGEN = "autogen"


@dataclass(frozen=True)
class SpriteIdentifier:
    head_id: int
    body_id: Optional[int] = None
    alt_letter: str = ""
    category: SpriteCategory = SpriteCategory.BASE

    @property
    def is_fusion(self):
        return self.body_id is not None

    @property
    def base_id(self):
        return derive_base_id(self)

    @property
    def sprite_id(self):
        return f"{self.base_id}{self.alt_letter}"

    @property
    def image_type(self):
        return "alt" if self.alt_letter else "main"

    def __str__(self):
        return self.sprite_id


def strip_image_suffix(name):
    s = str(name).strip()
    if s.lower().endswith(IMAGE_SUFFIXES):
        return s.rsplit(".", 1)[0]
    return s


def letters_to_index(letters):
    """Bijective base-26 index of an alt suffix: "" -> 0, "a" -> 1, "z" -> 26, "aa" -> 27."""
    if not letters:
        return 0
    index = 0
    for char in letters.lower():
        if not "a" <= char <= "z":
            raise ValueError(f"Not an alt letter: {char!r}")
        index = index * 26 + (ord(char) - ord("a") + 1)
    return index


def derive_base_id(identifier):
    if identifier.body_id is None:
        return str(identifier.head_id)
    return f"{identifier.head_id}.{identifier.body_id}"


def _species_id(part, token, reason):
    # canonical form only: ASCII digits, no sign, no leading zeros
    if not SPECIES_ID_RE.fullmatch(part):
        raise ParseError(token, reason, f"{part!r} is not a species id")
    value = int(part)
    if not 1 <= value <= MAX_SPECIES_ID:
        raise ParseError(token, reason, f"{value} outside 1..{MAX_SPECIES_ID}")
    return value


def _check_category(token, identifier):
    category = identifier.category
    if category is SpriteCategory.AUTOGEN:
        if not identifier.is_fusion or identifier.alt_letter:
            raise ParseError(token, ParseError.INVALID_CATEGORY, "autogen sprites are fusions without alt letters")
    elif category is SpriteCategory.CUSTOM:
        if not identifier.is_fusion:
            raise ParseError(token, ParseError.INVALID_CATEGORY, "custom sprites need a body id")
    elif identifier.is_fusion:
        raise ParseError(token, ParseError.INVALID_CATEGORY, "base sprites have no body id")


def parse_sprite_id(token, category=None):
    """Parse ``5``, ``5a``, ``5.10`` or ``5.10b`` into a SpriteIdentifier.

    Without an explicit category, fusions are treated as custom art and
    single species as base art.
    """
    raw = str(token).strip()
    alt_match = ALT_SUFFIX_RE.search(raw)
    alt_letter = alt_match.group(0).lower() if alt_match else ""
    remainder = raw[:alt_match.start()] if alt_match else raw

    if "." in remainder:
        head, body = remainder.split(".", 1)
        head_id = _species_id(head, token, ParseError.MALFORMED_BODY)
        body_id = _species_id(body, token, ParseError.MALFORMED_BODY)
    else:
        head_id = _species_id(remainder, token, ParseError.MALFORMED_HEAD)
        body_id = None

    if category is None:
        category = SpriteCategory.CUSTOM if body_id is not None else SpriteCategory.BASE
    elif not isinstance(category, SpriteCategory):
        category = SpriteCategory(category)
    identifier = SpriteIdentifier(head_id=head_id, body_id=body_id, alt_letter=alt_letter, category=category)
    _check_category(token, identifier)
    return identifier


def with_category(identifier, category):
    """Re-validate an identifier under another category."""
    return parse_sprite_id(identifier.sprite_id, category)
