from typing import NamedTuple

from . import SPRITE_SIZE
from .errors import OutOfBounds
from .identifiers import SpriteCategory, letters_to_index, with_category

COLUMNS = {
    SpriteCategory.BASE: 10,
    SpriteCategory.CUSTOM: 20,
    SpriteCategory.AUTOGEN: 10,
}


class Rectangle(NamedTuple):
    x: int
    y: int
    width: int
    height: int

    @property
    def box(self):
        """Pillow-style ``(left, top, right, bottom)``."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


def cell_index(identifier):
    # cell 0 holds the unmodified base art, so alt "a" is cell 1
    if identifier.category is SpriteCategory.BASE:
        return letters_to_index(identifier.alt_letter)
    return identifier.body_id


def resolve_position(identifier, category=None, sheet_width=None, sheet_height=None, tile_size=SPRITE_SIZE):
    if category is not None and category is not identifier.category:
        identifier = with_category(identifier, category)

    columns = COLUMNS[identifier.category]
    index = cell_index(identifier)
    rect = Rectangle(
        x=(index % columns) * tile_size,
        y=(index // columns) * tile_size,
        width=tile_size,
        height=tile_size,
    )

    if sheet_height is not None and rect.y + rect.height > sheet_height:
        raise OutOfBounds(f"{identifier.sprite_id}: row ends at {rect.y + rect.height}px, sheet is {sheet_height}px tall")
    if sheet_width is not None and rect.x + rect.width > sheet_width:
        raise OutOfBounds(f"{identifier.sprite_id}: column ends at {rect.x + rect.width}px, sheet is {sheet_width}px wide")
    return rect
