from typing import Any, Dict, List, Optional, TypedDict, Union


class JSONAPIResourceIdentifier(TypedDict, total=False):
    id: str
    type: str
    meta: Dict[str, Any]


class JSONAPIRelationship(TypedDict, total=False):
    data: Union[JSONAPIResourceIdentifier, List[JSONAPIResourceIdentifier], None]
    links: Dict[str, Any]
    meta: Dict[str, Any]


class JSONAPIResourceObject(TypedDict, total=False):
    id: str
    type: str
    attributes: Dict[str, Any]
    relationships: Dict[str, JSONAPIRelationship]
    meta: Dict[str, Any]
    links: Dict[str, Any]


JSONAPIData = Union[JSONAPIResourceObject, List[JSONAPIResourceObject], None]


class JSONAPIDocument(TypedDict, total=False):
    data: JSONAPIData
    meta: Dict[str, Any]
    errors: List[Dict[str, Any]]
    included: List[JSONAPIResourceObject]
    links: Dict[str, Any]
    jsonapi: Dict[str, Any]


# attributes + relationships + "id", "type" and "_meta"
FlattenedResource = Dict[str, Any]

ResourceMap = Dict[str, JSONAPIResourceObject]

Collections = Dict[str, List[Any]]


class ParseResult(TypedDict, total=False):
    data: Union[FlattenedResource, List[FlattenedResource]]
    jsonapi: Dict[str, Any]
    meta: Optional[Dict[str, Any]]
    links: Optional[Dict[str, Any]]
    collect: Collections
