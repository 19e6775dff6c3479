#
# Lookup table of the included resources: "{type}-{id}" -> resource object
#
from typing import Any, Dict, Iterable, Optional

import jsonapi_flatten
from .config import ParseConfig
from .formatting import flatten_resource
from .jsonapi_types import Collections, JSONAPIDocument, JSONAPIResourceObject, ResourceMap
from .util import deep_clone, generate_resource_key, is_valid_resource


def init_collections(config: ParseConfig) -> Optional[Collections]:
    """
    :return: an empty list for every type in config.collect, None if nothing has to be collected
    """
    if config.collect is None:
        return None
    return {resource_type: [] for resource_type in config.collect}


def collect_resource(resource: JSONAPIResourceObject, collections: Optional[Collections], flatten: bool = False) -> None:
    """
    Append a copy of resource to its collection if its type was requested
    :param flatten: add a flattened copy instead of the resource itself (relationships are not resolved)
    """
    if not collections:
        return
    collection = collections.get(resource["type"])
    if collection is None:
        return
    collection.append(flatten_resource(resource) if flatten else deep_clone(resource))


def build_resource_map(
    document: JSONAPIDocument,
    config: ParseConfig,
    collections: Optional[Collections] = None,
    resource_map: Optional[Dict[str, Any]] = None,
    development: bool = False,
) -> Optional[ResourceMap]:
    """
    Index the included resources by type and id
    Duplicate keys are not an error, the last resource wins
    :param document: validated document
    :param config: parse configuration
    :param collections: collections created by init_collections()
    :param resource_map: empty dict to fill (eg. from a pool), a new dict is created if None
    :param development: log the resources that are skipped
    :return: the resource map or None if there are no included resources
    """
    included = document.get("included")
    if not included:
        return None

    if resource_map is None:
        resource_map = {}
    _index_resources(included, config, collections, resource_map, development)
    return resource_map


def _index_resources(
    included: Iterable[Any], config: ParseConfig, collections: Optional[Collections], resource_map: Dict[str, Any], development: bool
) -> None:
    for index, resource in enumerate(included):
        if not is_valid_resource(resource):
            if development:
                jsonapi_flatten.log.warning(f"Skipping invalid included resource included[{index}]: {resource!r}")
            continue
        collect_resource(resource, collections, config.collect_is_parse)
        resource_map[generate_resource_key(resource)] = resource
