"""Payload codec between graph models and Qdrant point payloads.

Payloads are a tagged union discriminated by the ``type`` field:

    {"type": "entity", "name": ..., "entityType": ..., "observations": [...]}
    {"type": "relation", "from": ..., "to": ..., "relationType": ...}

Decoding validates the shape of each variant and rejects anything else
instead of coercing it, so foreign or corrupt points never reach callers.
"""

from typing import Any

from graphmem_lite.log_config import get_logger
from graphmem_lite.models import Entity, Relation

log = get_logger("codec")

ENTITY_TYPE = "entity"
RELATION_TYPE = "relation"


def encode_entity(entity: Entity) -> dict[str, Any]:
    """Build the payload for an entity point."""
    return {"type": ENTITY_TYPE, **entity.to_dict()}


def encode_relation(relation: Relation) -> dict[str, Any]:
    """Build the payload for a relation point."""
    return {"type": RELATION_TYPE, **relation.to_dict()}


def encode(element: Entity | Relation) -> dict[str, Any]:
    """Build the payload for any graph element."""
    if isinstance(element, Entity):
        return encode_entity(element)
    if isinstance(element, Relation):
        return encode_relation(element)
    raise TypeError(f"Cannot encode {type(element).__name__} as a graph payload")


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


def _decode_entity(payload: dict[str, Any]) -> Entity | None:
    name = payload.get("name")
    entity_type = payload.get("entityType")
    observations = payload.get("observations")

    if not (_is_str(name) and name and _is_str(entity_type)):
        return None
    if not isinstance(observations, (list, tuple)):
        return None
    if not all(_is_str(obs) for obs in observations):
        return None
    return Entity(name=name, entity_type=entity_type, observations=list(observations))


def _decode_relation(payload: dict[str, Any]) -> Relation | None:
    from_entity = payload.get("from")
    to_entity = payload.get("to")
    relation_type = payload.get("relationType")

    if not (_is_str(from_entity) and _is_str(to_entity) and _is_str(relation_type)):
        return None
    return Relation(from_entity=from_entity, to_entity=to_entity, relation_type=relation_type)


def decode_payload(payload: Any) -> Entity | Relation | None:
    """Decode a stored payload into a graph element.

    Args:
        payload: Raw payload from a search hit (may be None or any shape)

    Returns:
        Entity or Relation when the payload matches that variant exactly,
        None otherwise. Never raises.
    """
    if not isinstance(payload, dict):
        return None

    kind = payload.get("type")
    if kind == ENTITY_TYPE:
        decoded = _decode_entity(payload)
    elif kind == RELATION_TYPE:
        decoded = _decode_relation(payload)
    else:
        decoded = None

    if decoded is None:
        log.trace(f"Discarding non-graph payload: type={kind!r}")
    return decoded
