"""Knowledge graph domain models.

Entities are the nodes of the graph and relations are its directed, typed
edges. Both serialize to the camelCase field names used in stored payloads.
"""

from dataclasses import dataclass, field
from typing import Any

from graphmem_lite.errors import ValidationError


@dataclass
class Entity:
    """A named node in the knowledge graph.

    Attributes:
        name: Unique name, the sole source of the entity's identity
        entity_type: Free-form category (e.g., "person", "project")
        observations: Ordered free-form facts about the entity
    """

    name: str
    entity_type: str
    observations: list[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.name:
            raise ValidationError("Entity name must be non-empty", operation="Entity")
        self.observations = list(self.observations)

    def to_dict(self) -> dict[str, Any]:
        """Convert entity to its payload field layout."""
        return {
            "name": self.name,
            "entityType": self.entity_type,
            "observations": list(self.observations),
        }


@dataclass
class Relation:
    """A directed, typed edge between two entities (by name).

    Identity is the ordered triple (from_entity, relation_type, to_entity);
    changing any field addresses a different stored point.
    """

    from_entity: str
    to_entity: str
    relation_type: str

    def to_dict(self) -> dict[str, Any]:
        """Convert relation to its payload field layout."""
        return {
            "from": self.from_entity,
            "to": self.to_entity,
            "relationType": self.relation_type,
        }
