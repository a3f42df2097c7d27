# File: ormgen/dsl.py
"""
ormgen - Schema DSL Parser
===========================
Turns compact command-line tokens into field and relation descriptors.

Grammar::

    field     := name ":" type (":" modifier)*
    modifier  := "nullable" | "null"
               | "unique"   | "uniq"
               | "indexed"  | "index" | "idx"
               | "default=" value
    relation  := name ":" kind ":" Entity [":" foreign_key]
    kind      := "belongs_to" | "belongsto"
               | "has_one"    | "hasone"
               | "has_many"   | "hasmany"

Batches are comma-separated.  Each token is parsed on its own: a malformed
token is dropped from the batch and reported on ``ParseResult.warnings``,
so one typo yields a shorter list rather than a failed command.  Use
``parse_fields_strict`` / ``parse_relations_strict`` to fail fast instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Iterable, List, Optional, Tuple, TypeVar

from ormgen.errors import (
    EmptyDefaultError,
    MalformedFieldError,
    MalformedRelationError,
    SchemaSyntaxError,
    UnknownModifierError,
    UnknownRelationKindError,
)
from ormgen.models import (
    FieldDefinition,
    RelationDefinition,
    RelationType,
    SchemaDescriptor,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("ormgen.dsl")

T = TypeVar("T")

_NULLABLE_MODIFIERS = frozenset({"nullable", "null"})
_UNIQUE_MODIFIERS = frozenset({"unique", "uniq"})
_INDEXED_MODIFIERS = frozenset({"indexed", "index", "idx"})
_DEFAULT_PREFIX: str = "default="

_RELATION_KINDS: Dict[str, RelationType] = {
    "belongs_to": RelationType.BELONGS_TO,
    "belongsto": RelationType.BELONGS_TO,
    "has_one": RelationType.HAS_ONE,
    "hasone": RelationType.HAS_ONE,
    "has_many": RelationType.HAS_MANY,
    "hasmany": RelationType.HAS_MANY,
}


# ---------------------------------------------------------------------------
# Batch result
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ParseResult(Generic[T]):
    """Accepted items of a batch plus one warning per dropped token."""

    items: List[T] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    rejected: List[SchemaSyntaxError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.rejected

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


# ---------------------------------------------------------------------------
# Single-token parsers
# ---------------------------------------------------------------------------


def parse_field(token: str) -> FieldDefinition:
    """
    Parse ``name:type[:modifier]*`` into a ``FieldDefinition``.

    Raises:
        MalformedFieldError: fewer than two parts, or an empty name / type.
        UnknownModifierError: a modifier outside the recognised set.
        EmptyDefaultError: ``default=`` without a value.

    Example:
        >>> parse_field("email:string:unique:indexed")
        <FieldDefinition email:string [unique, indexed]>
    """
    parts: List[str] = token.split(":")
    if len(parts) < 2:
        raise MalformedFieldError(token)

    name: str = parts[0].strip()
    logical_type: str = parts[1].strip()
    if not name or not logical_type:
        raise MalformedFieldError(token)

    nullable = unique = indexed = False
    default: Optional[str] = None

    for raw in parts[2:]:
        modifier: str = raw.strip().lower()
        if not modifier:
            continue
        if modifier in _NULLABLE_MODIFIERS:
            nullable = True
        elif modifier in _UNIQUE_MODIFIERS:
            unique = True
        elif modifier in _INDEXED_MODIFIERS:
            indexed = True
        elif modifier.startswith(_DEFAULT_PREFIX):
            default = raw.strip()[len(_DEFAULT_PREFIX):].strip()
            if not default:
                raise EmptyDefaultError(token)
        else:
            raise UnknownModifierError(token, raw.strip())

    return FieldDefinition(
        name=name,
        logical_type=logical_type,
        nullable=nullable,
        unique=unique,
        indexed=indexed,
        default=default,
    )


def parse_relation(token: str) -> RelationDefinition:
    """
    Parse ``name:kind:Entity[:foreign_key]`` into a ``RelationDefinition``.

    Raises:
        MalformedRelationError: fewer than three parts, or an empty
            name / entity.
        UnknownRelationKindError: kind outside the recognised set.
    """
    parts: List[str] = token.split(":")
    if len(parts) < 3:
        raise MalformedRelationError(token)

    name: str = parts[0].strip()
    kind_token: str = parts[1].strip()
    related: str = parts[2].strip()
    if not name or not related:
        raise MalformedRelationError(token)

    kind: Optional[RelationType] = _RELATION_KINDS.get(kind_token.lower())
    if kind is None:
        raise UnknownRelationKindError(token, kind_token)

    foreign_key: Optional[str] = None
    if len(parts) > 3 and parts[3].strip():
        foreign_key = parts[3].strip()

    return RelationDefinition(
        name=name,
        relation_type=kind,
        related_entity=related,
        foreign_key=foreign_key,
    )


# ---------------------------------------------------------------------------
# Batch parsers
# ---------------------------------------------------------------------------


def split_batch(batch: Optional[str]) -> List[str]:
    """Split a comma-separated batch, dropping blank tokens."""
    if not batch:
        return []
    return [tok.strip() for tok in batch.split(",") if tok.strip()]


def _parse_batch(
    batch: Optional[str],
    parser: Callable[[str], T],
    label: str,
) -> ParseResult[T]:
    result: ParseResult[T] = ParseResult()
    for token in split_batch(batch):
        try:
            result.items.append(parser(token))
        except SchemaSyntaxError as exc:
            result.rejected.append(exc)
            message: str = f"Skipped {label} '{token}': {exc}"
            result.warnings.append(message)
            logger.warning("Skipped %s '%s': %s", label, token, exc)
    return result


def parse_fields(batch: Optional[str]) -> ParseResult[FieldDefinition]:
    """
    Parse a comma-separated field batch, dropping malformed tokens.

    Example:
        >>> r = parse_fields("name:string,age:i32:bogus")
        >>> [f.name for f in r.items], len(r.warnings)
        (['name'], 1)
    """
    return _parse_batch(batch, parse_field, "field")


def parse_relations(batch: Optional[str]) -> ParseResult[RelationDefinition]:
    """Parse a comma-separated relation batch, dropping malformed tokens."""
    return _parse_batch(batch, parse_relation, "relation")


def parse_name_list(batch: Optional[str]) -> List[str]:
    """Parse a comma-separated list of plain names (override sets)."""
    return split_batch(batch)


def parse_fields_strict(batch: Optional[str]) -> List[FieldDefinition]:
    """Parse a field batch, raising on the first malformed token."""
    return [parse_field(token) for token in split_batch(batch)]


def parse_relations_strict(batch: Optional[str]) -> List[RelationDefinition]:
    """Parse a relation batch, raising on the first malformed token."""
    return [parse_relation(token) for token in split_batch(batch)]


# ---------------------------------------------------------------------------
# Descriptor assembly
# ---------------------------------------------------------------------------


def _dedupe(names: Iterable[str]) -> Tuple[str, ...]:
    seen: List[str] = []
    for name in names:
        if name not in seen:
            seen.append(name)
    return tuple(seen)


def build_descriptor(
    name: str,
    *,
    fields: Optional[str] = None,
    relations: Optional[str] = None,
    table: Optional[str] = None,
    translatable: Optional[str] = None,
    attachments_single: Optional[str] = None,
    attachments_multi: Optional[str] = None,
    indexed: Optional[str] = None,
    unique: Optional[str] = None,
    nullable: Optional[str] = None,
    soft_deletes: bool = False,
    timestamps: bool = True,
    tokenize: bool = False,
    strict: bool = False,
) -> Tuple[SchemaDescriptor, List[str]]:
    """
    Build a ``SchemaDescriptor`` from raw batch strings.

    Returns ``(descriptor, warnings)``.  With ``strict=True`` the first
    malformed token raises and ``warnings`` is always empty.
    """
    warnings: List[str] = []

    if strict:
        field_items: List[FieldDefinition] = parse_fields_strict(fields)
        relation_items: List[RelationDefinition] = parse_relations_strict(relations)
    else:
        field_result = parse_fields(fields)
        relation_result = parse_relations(relations)
        field_items = field_result.items
        relation_items = relation_result.items
        warnings.extend(field_result.warnings)
        warnings.extend(relation_result.warnings)

    descriptor: SchemaDescriptor = SchemaDescriptor(
        name=name,
        table=table or None,
        fields=tuple(field_items),
        relations=tuple(relation_items),
        translatable=_dedupe(parse_name_list(translatable)),
        attachments_single=_dedupe(parse_name_list(attachments_single)),
        attachments_multi=_dedupe(parse_name_list(attachments_multi)),
        indexed=_dedupe(parse_name_list(indexed)),
        unique=_dedupe(parse_name_list(unique)),
        nullable=_dedupe(parse_name_list(nullable)),
        soft_deletes=soft_deletes,
        timestamps=timestamps,
        tokenize=tokenize,
    )

    logger.debug(
        "Built descriptor %r with %d warning(s).", descriptor, len(warnings)
    )
    return descriptor, warnings


__all__: List[str] = [
    "ParseResult",
    "parse_field",
    "parse_relation",
    "split_batch",
    "parse_fields",
    "parse_relations",
    "parse_name_list",
    "parse_fields_strict",
    "parse_relations_strict",
    "build_descriptor",
]

logger.debug("ormgen.dsl loaded.")
