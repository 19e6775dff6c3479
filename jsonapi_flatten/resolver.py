# Relationship resolution
#
# For every relationship of a resource, the resource identifiers in "data" are looked up
# in the resource map and replaced by the flattened included resource.
# The resolved values are stored in the attributes under the relationship name.
#
# Resolution is depth first, driven by an explicit stack instead of recursive calls,
# so long relationship chains don't hit the interpreter recursion limit.
# It is bounded in two ways:
# - call_level: relationships deeper than call_level are copied as raw identifiers
# - the circular reference guard: a resource that's already being resolved higher up on the
#   current path is returned as a bare identifier. The guard is path scoped, the same
#   resource may be expanded in different branches of the graph (eg. two articles, one author)
#
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set, Tuple, Union

from .config import ParseConfig
from .formatting import flatten_resource
from .jsonapi_types import FlattenedResource, JSONAPIRelationship, JSONAPIResourceIdentifier, JSONAPIResourceObject, ResourceMap
from .util import deep_clone, extract_resource_identifier, generate_resource_key, is_empty, safe_assign
from .verifier import validate_relationship

# (container, index, resource identifier): the resolved identifier is stored in container[index]
Reference = Tuple[Any, Any, Any]


class _PendingResource:
    """
    Work stack entry: a resource whose relationship references are being resolved
    """

    __slots__ = ("resource", "attributes", "call_depth", "references", "resource_key", "resource_ref", "slot", "result")

    def __init__(self, resource: Mapping[str, Any], attributes: Dict[str, Any], call_depth: int, references: Iterator[Reference]) -> None:
        self.resource = resource
        self.attributes = attributes
        self.call_depth = call_depth
        self.references = references
        # set for included resources, the key is in the guard while the entry is on the stack
        self.resource_key: Optional[str] = None
        self.resource_ref: Optional[Mapping[str, Any]] = None
        # (container, index) the flattened resource is stored in, None for the resource we started from
        self.slot: Optional[Tuple[Any, Any]] = None
        self.result: Optional[JSONAPIResourceObject] = None


class RelationshipResolver:
    """
    Resolves the relationships of resources against the included resources of one document
    :param resource_map: lookup table created by build_resource_map()
    :param config: parse configuration
    :param circular_ref_guard: empty set used to track the keys on the current path
    """

    def __init__(self, resource_map: ResourceMap, config: ParseConfig, circular_ref_guard: Optional[Set[str]] = None) -> None:
        self.resource_map = resource_map
        self.config = config
        self.circular_ref_guard = circular_ref_guard if circular_ref_guard is not None else set()

    def resolve_relationships(
        self, resource: JSONAPIResourceObject, flatten_related: bool, call_depth: int = 0
    ) -> JSONAPIResourceObject:
        """
        :param resource: resource object
        :param flatten_related: also resolve the relationships of the related resources
        :param call_depth: number of relationships between the primary resource and this resource
        :return: a copy of resource, its attributes contain the resolved relationships
        """
        pending = self._open_resource(resource, call_depth)
        self._run([pending], flatten_related)
        return pending.result

    def handle_max_depth_reached(self, resource: JSONAPIResourceObject) -> JSONAPIResourceObject:
        """
        Copy the relationship data (resource identifiers) to the attributes without resolving it
        """
        attributes = self._copy_attributes(resource)
        relationships = resource.get("relationships")
        if isinstance(relationships, Mapping):
            for relation_key, relationship in relationships.items():
                if isinstance(relationship, Mapping) and relationship.get("data") is not None:
                    attributes[relation_key] = deep_clone(relationship["data"])

        return {**resource, "attributes": attributes}

    def process_relationship(self, attributes: Dict[str, Any], relationship: JSONAPIRelationship, relation_key: str) -> List[Reference]:
        """
        Prepare attributes[relation_key] for the resolved relationship
        Relationships without data are stored without their links, or left out if nothing remains
        :return: the (container, index, resource identifier) references that still have to be resolved
        """
        data = relationship.get("data")
        if data is not None:
            if isinstance(data, list):
                resolved: List[Any] = [None] * len(data)
                attributes[relation_key] = resolved
                return [(resolved, index, identifier) for index, identifier in enumerate(data)]
            attributes[relation_key] = None
            return [(attributes, relation_key, data)]

        other_fields = {key: value for key, value in relationship.items() if key != "links" and not is_empty(value)}
        if other_fields:
            attributes[relation_key] = deep_clone(other_fields)
        return []

    def resolve_resource_reference(
        self, resource_ref: JSONAPIResourceIdentifier, flatten_related: bool, call_depth: int
    ) -> Union[FlattenedResource, JSONAPIResourceIdentifier]:
        """
        :param resource_ref: resource identifier
        :return: the flattened included resource, or a copy of resource_ref if it's not included
        """
        resolved = self._open_reference(resource_ref, flatten_related, call_depth)
        if not isinstance(resolved, _PendingResource):
            return resolved

        holder: List[Any] = [None]
        resolved.slot = (holder, 0)
        self._run([resolved], flatten_related)
        return holder[0]

    def resolve_primary(self, resource: JSONAPIResourceObject, flatten_related: bool) -> JSONAPIResourceObject:
        """
        Resolve the relationships of a primary data resource
        The resource itself is guarded so it's not expanded again when it's referenced by its related resources
        """
        resource_key = generate_resource_key(resource)
        self.circular_ref_guard.add(resource_key)
        try:
            return self.resolve_relationships(resource, flatten_related)
        finally:
            self.circular_ref_guard.discard(resource_key)

    def _run(self, stack: List[_PendingResource], flatten_related: bool) -> None:
        """
        Depth first resolution with an explicit stack, the stack holds the resources on the current path
        """
        try:
            while stack:
                pending = stack[-1]
                reference = next(pending.references, None)
                if reference is None:
                    self._close(pending)
                    stack.pop()
                    continue

                container, index, resource_ref = reference
                resolved = self._open_reference(resource_ref, flatten_related, pending.call_depth + 1)
                if isinstance(resolved, _PendingResource):
                    resolved.slot = (container, index)
                    stack.append(resolved)
                else:
                    container[index] = resolved
        finally:
            for pending in stack:
                if pending.resource_key is not None:
                    self.circular_ref_guard.discard(pending.resource_key)

    def _open_resource(self, resource: Mapping[str, Any], call_depth: int) -> _PendingResource:
        if call_depth >= self.config.call_level:
            attributes = self.handle_max_depth_reached(resource)["attributes"]
            return _PendingResource(resource, attributes, call_depth, iter(()))

        attributes = self._copy_attributes(resource)
        references: List[Reference] = []
        relationships = resource.get("relationships")
        if isinstance(relationships, Mapping):
            for relation_key, relationship in relationships.items():
                if not validate_relationship(relationship):
                    continue
                references.extend(self.process_relationship(attributes, relationship, relation_key))

        return _PendingResource(resource, attributes, call_depth, iter(references))

    def _open_reference(
        self, resource_ref: Any, flatten_related: bool, call_depth: int
    ) -> Union[FlattenedResource, JSONAPIResourceIdentifier, _PendingResource]:
        """
        :return: the resolved value, or a stack entry when the relationships of the matched resource must be resolved first
        """
        if not isinstance(resource_ref, Mapping):
            return deep_clone(resource_ref)

        resource_key = generate_resource_key(resource_ref)
        matched_resource = self.resource_map.get(resource_key)
        if matched_resource is None:
            return deep_clone(resource_ref)

        if resource_key in self.circular_ref_guard:
            return extract_resource_identifier(matched_resource)

        if not flatten_related:
            return flatten_resource(matched_resource, self._extra_meta(matched_resource, resource_ref))

        pending = self._open_resource(matched_resource, call_depth)
        pending.resource_key = resource_key
        pending.resource_ref = resource_ref
        self.circular_ref_guard.add(resource_key)
        return pending

    def _close(self, pending: _PendingResource) -> None:
        processed = {**pending.resource, "attributes": pending.attributes}
        if pending.slot is None:
            pending.result = processed
            return

        container, index = pending.slot
        extra_meta = self._extra_meta(pending.resource, pending.resource_ref)
        container[index] = flatten_resource(processed, extra_meta, clone_attributes=False)
        self.circular_ref_guard.discard(pending.resource_key)
        pending.resource_key = None

    @staticmethod
    def _extra_meta(matched_resource: Mapping[str, Any], resource_ref: Mapping[str, Any]) -> Dict[str, Any]:
        # identifier meta wins over the meta of the included resource
        return safe_assign({}, matched_resource.get("meta"), resource_ref.get("meta"))

    @staticmethod
    def _copy_attributes(resource: Mapping[str, Any]) -> Dict[str, Any]:
        attributes = resource.get("attributes")
        if not isinstance(attributes, Mapping):
            return {}
        return deep_clone(dict(attributes))
