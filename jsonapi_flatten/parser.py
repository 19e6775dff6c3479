# JSON:API document parser
#
# parse() goes through the following states:
#   IDLE -> VALIDATING -> CONFIGURING -> BUILDING_MAP -> FLATTENING -> BUILDING_RESULT -> CLEANING_UP -> IDLE
#
# - VALIDATING: production mode only runs base_check(), development mode runs the full validation.
#   Invalid documents are returned unchanged
# - CONFIGURING: the configuration is merged with the defaults and validated
# - BUILDING_MAP: the included resources are indexed and the requested types are collected
# - FLATTENING: the primary data is flattened, relationships are resolved against the map
# - BUILDING_RESULT: data, jsonapi, meta, links and collect are assembled
# - CLEANING_UP: pooled buffers are released, this happens on every exit path
#
# Errors are re-raised in development mode, in production mode the input is returned unchanged.
#
# A parser instance keeps per-call state and pooled buffers: don't share one instance between
# threads, use one instance per concurrent caller (the class level JsonapiParser.parse() does this).
#
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Set, Union

import jsonapi_flatten
from .config import ParseConfig, gen_config
from .errors import InvalidResourceError, JsonapiError
from .formatting import build_parse_result, flatten_resource
from .jsonapi_types import Collections, FlattenedResource, JSONAPIDocument, JSONAPIResourceObject
from .pool import DictPool, SetPool
from .resolver import RelationshipResolver
from .resource_map import build_resource_map, init_collections
from .util import hybridmethod, is_valid_resource, map_array
from .verifier import base_check, validate_document

ParseConfigArg = Union[ParseConfig, Mapping[str, Any], None]


class ParserState(Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    CONFIGURING = "configuring"
    BUILDING_MAP = "building_map"
    FLATTENING = "flattening"
    BUILDING_RESULT = "building_result"
    CLEANING_UP = "cleaning_up"


class JsonapiParser:
    """
    Flattens JSON:API documents: relationships are replaced by the included resources they refer to

    :param development: development mode validates documents completely and raises errors,
                        production mode only performs a base check and returns the input when parsing fails
    :param map_pool_size: number of idle resource maps kept for reuse
    :param set_pool_size: number of idle circular reference guards kept for reuse
    """

    def __init__(self, development: bool = False, map_pool_size: int = 20, set_pool_size: int = 10) -> None:
        self.development = development
        self.map_pool = DictPool(map_pool_size)
        self.set_pool = SetPool(set_pool_size)
        self.state = ParserState.IDLE

        # per-call state
        self.config: Optional[ParseConfig] = None
        self.included_map: Optional[Dict[str, Any]] = None
        self.circular_ref_guard: Optional[Set[str]] = None
        self.specified_collections: Optional[Collections] = None

        # configuration set with set_config(), used when parse() is called without configuration
        self._pending_config: ParseConfigArg = None

    @classmethod
    def create(cls, parse_config: ParseConfigArg = None, development: bool = False) -> "JsonapiParser":
        """
        :return: a new parser, parse_config is used for the parse() calls that don't pass a configuration
        """
        parser = cls(development=development)
        parser.set_config(parse_config)
        return parser

    def set_config(self, parse_config: ParseConfigArg = None) -> None:
        """
        Store a configuration for the next parse() calls,
        the configuration is validated when it's used
        """
        self._pending_config = parse_config

    @hybridmethod
    def parse(self, document: Any, parse_config: ParseConfigArg = None) -> Any:
        """
        Parse a JSON:API document
        :param document: decoded json document
        :param parse_config: ParseConfig or dict, overrides the configuration passed to set_config()
        :return: dict with the flattened "data", "jsonapi", "meta", "links" and optionally "collect",
                 or document itself if it's invalid, has no data or (in production mode) can't be parsed
        """
        try:
            self._transition(ParserState.VALIDATING)
            validated = self.validate(document)
            if validated is None:
                return document

            self._transition(ParserState.CONFIGURING)
            self.initialize_config(parse_config)

            if not self.has_data_to_parse(validated):
                return validated

            self._transition(ParserState.BUILDING_MAP)
            self.included_map = self.map_pool.get()
            if build_resource_map(validated, self.config, self.specified_collections, self.included_map, self.development) is None:
                self.map_pool.release(self.included_map)
                self.included_map = None

            self._transition(ParserState.FLATTENING)
            data = validated["data"]
            if isinstance(data, list):
                parsed_data = map_array(data, self.flatten_resource)
            else:
                parsed_data = self.flatten_resource(data)

            self._transition(ParserState.BUILDING_RESULT)
            return build_parse_result(validated, parsed_data, self.specified_collections)
        except Exception as exc:
            return self.handle_parse_error(exc, document)
        finally:
            self._transition(ParserState.CLEANING_UP)
            self.cleanup_resources()
            self._transition(ParserState.IDLE)

    @parse.classmethod
    def parse(cls, document: Any, parse_config: ParseConfigArg = None, development: bool = False) -> Any:
        """
        Parse document with a new parser instance
        """
        return cls(development=development).parse(document, parse_config)

    def validate(self, document: Any) -> Optional[JSONAPIDocument]:
        """
        :return: the document if it can be parsed, None otherwise
        """
        if not base_check(document):
            jsonapi_flatten.log.debug("Document not parsed: base check failed")
            return None

        if not self.development:
            return document

        validation = validate_document(document)
        if not validation.is_valid:
            jsonapi_flatten.log.error("JSON:API document validation failed:")
            for error in validation.errors:
                jsonapi_flatten.log.error(f"  - {error}")
            return None
        return validation.document

    def initialize_config(self, parse_config: ParseConfigArg = None) -> None:
        """
        Validate the configuration and create the requested collections
        :raises ConfigurationError: if the configuration is invalid
        """
        self.cleanup_resources()
        self.config = None
        self.config = gen_config(parse_config if parse_config is not None else self._pending_config)
        self.specified_collections = init_collections(self.config)

    def flatten_resource(self, resource: JSONAPIResourceObject) -> FlattenedResource:
        """
        Flatten a primary data resource, resolving its relationships if configured
        :raises InvalidResourceError: if the resource has no valid type or id
        """
        if not is_valid_resource(resource):
            raise InvalidResourceError("Resource object is missing the required type or id member", resource)

        if self.config.parse_included and self.included_map is not None:
            if self.circular_ref_guard is None:
                self.circular_ref_guard = self.set_pool.get()
            resolver = RelationshipResolver(self.included_map, self.config, self.circular_ref_guard)
            processed = resolver.resolve_primary(resource, self.config.flat_included_related)
            return flatten_resource(processed, clone_attributes=False)

        return flatten_resource(resource)

    @staticmethod
    def has_data_to_parse(document: JSONAPIDocument) -> bool:
        data = document.get("data")
        if isinstance(data, list):
            return len(data) > 0
        return bool(data)

    def handle_parse_error(self, exc: Exception, original_document: Any) -> Any:
        """
        :return: original_document in production mode
        :raises: exc in development mode
        """
        if self.development:
            jsonapi_flatten.log.error(f"Parse error: {exc}")
            raise exc
        if not isinstance(exc, JsonapiError):
            jsonapi_flatten.log.debug(f"Unexpected parse error: {exc!r}")
        return original_document

    def cleanup_resources(self) -> None:
        """
        Return the pooled buffers and clear the per-call state
        """
        if self.included_map is not None:
            self.map_pool.release(self.included_map)
            self.included_map = None

        if self.circular_ref_guard is not None:
            self.set_pool.release(self.circular_ref_guard)
            self.circular_ref_guard = None

        self.specified_collections = None

    def _transition(self, state: ParserState) -> None:
        jsonapi_flatten.log.debug(f"parser state: {self.state.value} -> {state.value}")
        self.state = state


def parse(document: Any, parse_config: ParseConfigArg = None, development: bool = False) -> Any:
    """
    Parse document with a new JsonapiParser, cfr. JsonapiParser.parse()
    """
    return JsonapiParser.parse(document, parse_config, development=development)
