"""Deterministic point IDs for graph elements.

Qdrant point IDs must be unsigned integers (or UUIDs). Graph elements are
mapped to IDs by hashing an identity key, so no ID allocation table is
needed and re-persisting an element overwrites its previous point.
"""

import hashlib

from graphmem_lite.models import Entity, Relation


def hash_id(text: str) -> int:
    """Derive a stable unsigned 32-bit ID from text.

    SHA-256 of the UTF-8 bytes, first 4 bytes read big-endian.
    """
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    return int.from_bytes(digest[:4], "big")


def entity_key(entity: Entity | str) -> str:
    """Identity key of an entity: its name."""
    return entity.name if isinstance(entity, Entity) else entity


def relation_key(relation: Relation, unambiguous: bool = False) -> str:
    """Identity key of a relation.

    The default key is the ``from-relationType-to`` join that existing
    stores were written with. It is ambiguous when field values contain
    hyphens. ``unambiguous=True`` length-prefixes each field of the triple
    instead, so no field value can make two distinct relations share a key;
    points written under one form are not addressable under the other.
    """
    parts = (relation.from_entity, relation.relation_type, relation.to_entity)
    if unambiguous:
        return "|".join(f"{len(part)}:{part}" for part in parts)
    return "-".join(parts)


def entity_id(entity: Entity | str) -> int:
    """Point ID for an entity or entity name."""
    return hash_id(entity_key(entity))


def relation_id(relation: Relation, unambiguous: bool = False) -> int:
    """Point ID for a relation."""
    return hash_id(relation_key(relation, unambiguous=unambiguous))
