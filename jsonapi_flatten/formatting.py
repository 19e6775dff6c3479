# Flattened resource and parse result formatting
#
# A flattened resource contains:
# - the extra meta (when resolving a relationship: resource meta + identifier meta)
# - the attributes, including the resolved relationships
# - the "id" and "type" of the resource, these are never shadowed by attributes or meta
# - "_meta": a copy of the resource meta, if the resource has meta
#
# Returned structures never share containers with the input document.
#
from typing import Any, Dict, List, Mapping, Optional, Union

from .errors import InvalidResourceError
from .jsonapi_types import Collections, FlattenedResource, JSONAPIDocument, ParseResult
from .util import deep_clone, is_empty, is_valid_resource, safe_assign

META_KEY = "_meta"


def flatten_resource(
    resource: Mapping[str, Any], extra_meta: Optional[Mapping[str, Any]] = None, clone_attributes: bool = True
) -> FlattenedResource:
    """
    Convert a resource object to a flat dict
    :param resource: resource object, its relationships may already have been resolved into the attributes
    :param extra_meta: meta items merged with the lowest precedence
    :param clone_attributes: False when the attributes dict already belongs to the caller (eg. created by the resolver)
    :return: flattened resource
    :raises InvalidResourceError: when the resource has no valid type or id
    """
    if not is_valid_resource(resource):
        raise InvalidResourceError("Resource object is missing the required type or id member", resource)

    attributes = resource.get("attributes") or {}
    if clone_attributes:
        attributes = deep_clone(attributes)

    flattened: FlattenedResource = {}
    safe_assign(flattened, deep_clone(extra_meta), attributes, {"id": resource["id"], "type": resource["type"]})

    meta = resource.get("meta")
    if not is_empty(meta):
        flattened[META_KEY] = deep_clone(meta)

    return flattened


def build_parse_result(
    document: JSONAPIDocument,
    data: Union[FlattenedResource, List[FlattenedResource]],
    collections: Optional[Collections] = None,
) -> ParseResult:
    """
    Assemble the parse result, "jsonapi.parsed" is set so the result won't be parsed again
    :param document: the validated input document
    :param data: flattened primary data
    :param collections: resources collected from "included", by type
    :return: parse result dict
    """
    jsonapi: Dict[str, Any] = safe_assign({}, deep_clone(document.get("jsonapi")), {"parsed": True})
    result: ParseResult = {
        "data": data,
        "jsonapi": jsonapi,
        "meta": deep_clone(document.get("meta")),
        "links": deep_clone(document.get("links")),
    }
    if not is_empty(collections):
        result["collect"] = collections
    return result
