# Parse configuration
#
# The configuration is validated when a parse call starts, before the document is touched.
# Options can be passed with their python names (call_level) or with the camelCase
# names used by JSON:API clients (callLevel).
#
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, ValidationError, field_validator
from pydantic.alias_generators import to_camel

import jsonapi_flatten
from .errors import ConfigurationError

# call levels above this value are accepted but may be slow on large graphs
CALL_LEVEL_WARNING_THRESHOLD = 10


class ParseConfig(BaseModel):
    """
    Options that control how relationships are resolved

    call_level limits the relationship chain length:
    - article.relationships.author -> level 1
    - article.relationships.author.relationships.company -> level 2
    - article.relationships.author.relationships.company.relationships.address -> level 3
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", frozen=True)

    # resolve relationships against the included resources
    parse_included: StrictBool = True
    # resolve the relationships of the included resources themselves
    flat_included_related: StrictBool = True
    # included resource types that should be collected in the result, eg. ["article", "user"]
    collect: Optional[List[StrictStr]] = None
    # flatten the collected resources
    collect_is_parse: StrictBool = False
    call_level: int = Field(default=5, ge=0, strict=True)

    @field_validator("call_level", mode="before")
    @classmethod
    def integral_call_level(cls, value: Any) -> Any:
        # decoded json may contain 2.0 for 2
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value

    @field_validator("call_level")
    @classmethod
    def warn_call_level(cls, value: int) -> int:
        if value > CALL_LEVEL_WARNING_THRESHOLD:
            jsonapi_flatten.log.warning(f"callLevel > {CALL_LEVEL_WARNING_THRESHOLD} may cause performance issues")
        return value


def gen_default_config() -> ParseConfig:
    """
    :return: the default parse configuration
    """
    return ParseConfig()


def gen_config(parse_config: Union[ParseConfig, Mapping[str, Any], None] = None) -> ParseConfig:
    """
    Merge the user supplied configuration with the defaults
    :param parse_config: ParseConfig instance, dict with (camelCase or snake_case) options or None
    :return: validated ParseConfig
    :raises ConfigurationError: when an option has an invalid type or value
    """
    if parse_config is None:
        return gen_default_config()
    if isinstance(parse_config, ParseConfig):
        return parse_config
    if not isinstance(parse_config, Mapping):
        raise ConfigurationError(f"parse config must be a mapping, not {type(parse_config).__name__}")

    try:
        return ParseConfig.model_validate(dict(parse_config))
    except ValidationError as exc:
        raise ConfigurationError(_describe_validation_error(exc)) from exc


def _describe_validation_error(exc: ValidationError) -> str:
    """
    Convert the pydantic errors to messages that mention the offending option
    """
    messages = []
    for error in exc.errors():
        loc = error.get("loc", ())
        option = loc[0] if loc else "config"
        if option in ("call_level", "callLevel"):
            messages.append("callLevel must be a non-negative number")
        elif option == "collect":
            if len(loc) > 1:
                messages.append("collect array must contain only strings")
            else:
                messages.append("collect must be an array of strings or null")
        else:
            messages.append(f"{option}: {error.get('msg')}")
    return ", ".join(dict.fromkeys(messages))
