"""
Populate mini-language parser.

Turns a compact string such as ``"author.profile:name,bio comments.user:handle"``
into a tree of PopulateSpec nodes describing which relationships to eager-load
and which columns to load on each of them.

Grammar:
    populate_string := expr (" " expr)*
    expr            := path (":" select)?
    path            := segment ("." segment)*
    select          := any-non-space-token

Dependencies: dataclasses (stdlib)
System role: Pure parsing step consumed by the query builder
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class PopulateSpec:
    """
    One relationship to eager-load.

    Attributes:
        path: Relationship attribute name on the parent model
        select: Comma-separated column names to load on the related model
            (None loads every column)
        children: Nested relationships to load from the related model
    """

    path: str
    select: str | None = None
    children: list["PopulateSpec"] = field(default_factory=list)

    @property
    def fields(self) -> list[str]:
        """Column names listed in select, in order, blanks dropped."""
        if not self.select:
            return []
        return [name.strip() for name in self.select.split(",") if name.strip()]


def parse_populate(populate: str | None) -> list[PopulateSpec]:
    """
    Parse a populate string into a list of PopulateSpec trees.

    Expressions sharing a prefix are merged into one subtree, so
    ``"a.b:x a.c:y"`` yields a single ``a`` node with children ``b`` and ``c``.
    When several expressions end on the same node, the last one's select wins.
    Segments are not validated here: ``"a."`` produces a child with an empty
    path, which the query builder rejects when resolving it against a model.

    Args:
        populate: Space-separated populate expressions (None or blank for none)

    Returns:
        list[PopulateSpec]: Top-level nodes in first-seen order
    """
    if not populate:
        return []

    # Pass 1: keyed map per level, {segment: {"select": str | None, "children": {...}}}
    tree: dict[str, dict[str, Any]] = {}
    for expression in populate.split():
        path_part, _, select = expression.partition(":")
        segments = path_part.split(".")

        level = tree
        for index, segment in enumerate(segments):
            node = level.setdefault(segment, {"select": None, "children": {}})
            if index == len(segments) - 1:
                node["select"] = select or None
            level = node["children"]

    # Pass 2: flatten
    return _flatten(tree)


def _flatten(level: dict[str, dict[str, Any]]) -> list[PopulateSpec]:
    """Convert one keyed level of the intermediate map into PopulateSpec nodes."""
    return [
        PopulateSpec(
            path=segment,
            select=node["select"],
            children=_flatten(node["children"]),
        )
        for segment, node in level.items()
    ]
