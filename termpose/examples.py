"""Example documents and schemas used by the demo and the tests."""

from dataclasses import dataclass
from typing import List

from termpose.trans import combine_trans, ensure_tag, float_trans, string_trans, tagged_sequence
from termpose.trans.base import Trans

# Product catalogue: one product per line, the description as a string block
PRODUCTS_TEXT = """\
products
	hammer cost:5 description"
		premium hammer. great for smashing
	"bee's knee" cost:9.50 description"
		supposedly really good thing
	twine cost:0 description"
		make a text adventure
"""


@dataclass(frozen=True)
class Product:
    """Catalogue entry decoded from a ``products`` document.

    Attributes:
        name: Product name (first, positional item of the line)
        cost: Price, from the ``cost`` field
        description: Free text, from the ``description`` field
    """
    name: str
    cost: float
    description: str


def product_trans() -> Trans[Product]:
    """Schema for a single product line."""
    return combine_trans(
        Product,
        lambda p: (p.name, p.cost, p.description),
        string_trans(),
        ensure_tag("cost", float_trans()),
        ensure_tag("description", string_trans()),
    )


def products_trans() -> Trans[List[Product]]:
    """Schema for a whole ``products`` document."""
    return tagged_sequence("products", product_trans())
