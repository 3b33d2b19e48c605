# resource.py: the Resource base class and its static schema declaration
#
"""
A resource class declares the JSON:API shape of a domain type:

    class User(Resource):
        schema = ResourceSchema(
            attributes={"email": str},
            relationships={"articles": Relationship("article", key="articles", inverse="author", has_many=True)},
        )

The relationship target is a type name rather than a class, it's looked up in the
application registry when the relationship is resolved so resource modules can
reference each other in any order.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
from .inflection import camelize
from .util import classproperty


@dataclass(frozen=True)
class Relationship:
    """
    :param type: type name of the related resources
    :param key: name of the attribute (or resolver) holding the related records
    :param inverse: name of the relationship on the related resource pointing back
    :param has_many: whether this is a to-many relationship
    """

    type: str
    key: str
    inverse: Optional[str] = None
    has_many: bool = False


@dataclass(frozen=True)
class ResourceSchema:
    # attribute types are documentation only, values aren't checked against them
    attributes: Dict[str, Any] = field(default_factory=dict)
    relationships: Dict[str, Relationship] = field(default_factory=dict)


RelationshipValue = Union["Resource", List["Resource"], None]


class Resource:
    """
    A serialized domain entity. Instances are created by the processors
    when an operation result is converted and aren't modified afterwards.
    """

    schema = ResourceSchema()

    def __init__(
        self,
        id: Optional[str] = None,
        attributes: Optional[Dict[str, Any]] = None,
        relationships: Optional[Dict[str, RelationshipValue]] = None,
    ) -> None:
        self.id = id
        self.attributes = attributes or {}
        self.relationships = relationships or {}

    @classproperty
    def type(cls) -> str:
        """
        :return: the jsonapi "type", the camelized class name, eg. BlogPost => blogPost
        """
        return camelize(cls.__name__)

    def to_dict(self) -> Dict[str, Any]:
        """
        :return: Encoded object according to the jsonapi specification:
        `data = {
                "attributes": { ... },
                "id": "...",
                "relationships": { ... },
                "type": "..."
                }`
        """
        relationships: Dict[str, Any] = {}
        for rel_name, related in self.relationships.items():
            if isinstance(related, (list, tuple)):
                relationships[rel_name] = [item.to_dict() for item in related]
            elif related is None:
                relationships[rel_name] = None
            else:
                relationships[rel_name] = related.to_dict()

        return dict(id=self.id, type=self.type, attributes=dict(self.attributes), relationships=relationships)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.type}:{self.id}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Resource):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None  # type: ignore[assignment]
