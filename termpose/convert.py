"""Conversion between Terms and plain data (YAML / JSON).

Terms map onto plain Python data as follows:

- atom ``hammer`` -> ``"hammer"``
- empty term ``()`` -> ``None``
- untagged list ``(a b)`` -> ``["a", "b"]``
- tagged node ``cost:5`` -> ``{"cost": "5"}``; a tagged node with zero or
  several children maps to ``{"tag": [...]}``

The mapping is lossy where plain data cannot tell shapes apart (a tag holding
one list versus a tag holding several children), so ``data_to_term`` is an
inverse only up to that normalization. YAML goes through ruamel.yaml, JSON
through the standard library.
"""

import json
from io import StringIO
from typing import Any

from ruamel.yaml import YAML

from termpose.core.term import Term


def _create_yaml_instance() -> YAML:
    """Create configured ruamel.yaml instance for dumping term data.

    Returns:
        YAML instance configured to:
        - Not wrap long strings
        - Use block style (not flow style)
        - Keep unicode characters unescaped
    """
    yaml = YAML()
    yaml.width = 4096
    yaml.default_flow_style = False
    yaml.allow_unicode = True
    return yaml


def term_to_data(term: Term) -> Any:
    """Convert a term to nested dicts, lists, strings and None."""
    if term.tag is None:
        if term.value is not None:
            return term.value
        if not term.children:
            return None
        return [term_to_data(child) for child in term.children]
    if term.value is not None:
        return {term.tag: term.value}
    if len(term.children) == 1:
        return {term.tag: term_to_data(term.children[0])}
    return {term.tag: [term_to_data(child) for child in term.children]}


def _scalar_text(data: Any) -> str:
    if isinstance(data, bool):
        return "true" if data else "false"
    return str(data)


def data_to_term(data: Any) -> Term:
    """Convert plain data (as produced by a YAML/JSON loader) to a term."""
    if data is None:
        return Term()
    if isinstance(data, dict):
        entries = []
        for key, value in data.items():
            if isinstance(value, list):
                children = tuple(data_to_term(item) for item in value)
            else:
                children = (data_to_term(value),)
            entries.append(Term(tag=_scalar_text(key), children=children))
        if len(entries) == 1:
            return entries[0]
        return Term(children=tuple(entries))
    if isinstance(data, (list, tuple)):
        return Term(children=tuple(data_to_term(item) for item in data))
    return Term.atom(_scalar_text(data))


def to_yaml(term: Term) -> str:
    """Dump a term as a YAML document."""
    yaml = _create_yaml_instance()
    stream = StringIO()
    yaml.dump(term_to_data(term), stream)
    return stream.getvalue()


def from_yaml(text: str) -> Term:
    """Load a YAML document into a term."""
    yaml = YAML(typ="safe")
    return data_to_term(yaml.load(text))


def to_json(term: Term, indent: int = 2) -> str:
    """Dump a term as JSON text."""
    return json.dumps(term_to_data(term), indent=indent, ensure_ascii=False) + "\n"


def from_json(text: str) -> Term:
    """Load JSON text into a term."""
    return data_to_term(json.loads(text))
