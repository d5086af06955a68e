"""Products demo - end-to-end demonstration of termpose.

Parses the example product catalogue, decodes it into Product values,
encodes the values back into a tree and prints both trees.
"""

import logging
from typing import List, Optional, Tuple

from termpose.core.parser import parse
from termpose.core.printer import DEFAULT_INDENT, pretty_print
from termpose.core.term import Term
from termpose.examples import PRODUCTS_TEXT, Product, products_trans

logger = logging.getLogger(__name__)


def demo_products(
    text: Optional[str] = None,
    verbose: bool = True,
    indent: str = DEFAULT_INDENT,
) -> Tuple[List[Product], Term]:
    """Run the products round trip.

    Args:
        text: Document to decode (uses PRODUCTS_TEXT if None)
        verbose: Print the parsed tree, the decoded products and the re-encoded tree
        indent: Indentation used when printing trees

    Returns:
        Tuple of (decoded products, re-encoded term)

    Raises:
        TermSyntaxError: The document does not parse
        SchemaError: The document does not match the products schema

    Example:
        >>> products, term = demo_products(verbose=False)
        >>> products[1].name
        "bee's knee"
    """
    if text is None:
        text = PRODUCTS_TEXT

    data = parse(text)
    if verbose:
        print("=" * 60)
        print("termpose products demo")
        print("=" * 60)
        print("\n[1] Parsed tree:")
        print(pretty_print(data, indent=indent), end="")

    schema = products_trans()
    products = schema.check(data)
    logger.info(f"Decoded {len(products)} products")
    if verbose:
        print(f"\n[2] Decoded {len(products)} products:")
        for product in products:
            print(f"    {product.name}: {product.cost:.2f} - {product.description}")

    and_back_again = schema.termify(products)
    if schema.check(and_back_again) != products:
        logger.warning("Re-encoded tree does not decode to the same products")
    if verbose:
        print("\n[3] Re-encoded tree:")
        print(pretty_print(and_back_again, indent=indent), end="")

    return products, and_back_again
