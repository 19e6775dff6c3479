# flake8: noqa: F401
#
# The logger has to be initialized first, the other modules log through jsonapi_flatten.log
#
from .flatten_init import log
from .errors import JsonapiError, StructuralValidationError, InvalidResourceError, ConfigurationError
from .config import ParseConfig, gen_config, gen_default_config
from .verifier import base_check, validate_document, validate_or_raise, ValidationResult
from .pool import ObjectPool, DictPool, SetPool
from .formatting import flatten_resource, build_parse_result
from .resolver import RelationshipResolver
from .parser import JsonapiParser, ParserState, parse
from .__about__ import __version__, __description__

Jsonapi = JsonapiParser

__all__ = (
    "__version__",
    "__description__",
    #
    "JsonapiParser",
    "Jsonapi",
    "ParserState",
    "parse",
    # config:
    "ParseConfig",
    "gen_config",
    "gen_default_config",
    # validation:
    "base_check",
    "validate_document",
    "validate_or_raise",
    "ValidationResult",
    # building blocks:
    "ObjectPool",
    "DictPool",
    "SetPool",
    "RelationshipResolver",
    "flatten_resource",
    "build_parse_result",
    # Errors:
    "JsonapiError",
    "StructuralValidationError",
    "InvalidResourceError",
    "ConfigurationError",
)
