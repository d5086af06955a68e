"""Bidirectional Term ⇄ value combinators.

Leaf combinators convert scalars; structural combinators compose them into
schemas for tagged fields, sequences, aggregates and mappings.
"""

from termpose.trans.api import deserialize, serialize
from termpose.trans.base import Trans
from termpose.trans.leaves import bool_trans, float_trans, int_trans, string_trans
from termpose.trans.structural import (
    combine_trans,
    ensure_tag,
    mapping_trans,
    pair_trans,
    sequence_trans,
    tagged_mapping_trans,
    tagged_sequence,
)

__all__ = [
    "Trans",
    "string_trans",
    "float_trans",
    "int_trans",
    "bool_trans",
    "ensure_tag",
    "tagged_sequence",
    "sequence_trans",
    "combine_trans",
    "pair_trans",
    "mapping_trans",
    "tagged_mapping_trans",
    "serialize",
    "deserialize",
]
