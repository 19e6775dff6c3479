# JSON:API document validation (https://jsonapi.org/format/#document-structure)
#
# validate_document() performs the full structural validation and collects all violations,
# messages are prefixed with their location, eg. "data[0]: relationships.author: ..."
#
# base_check() only verifies what is needed to start parsing, it runs before every parse
# validate_resource() and validate_relationship() are cheap per-object checks, validate_relationship()
# filters the relationships while resolving and validate_resource() follows util.is_valid_resource()
#
from typing import Any, Iterator, List, NamedTuple, Optional

from .errors import StructuralValidationError
from .jsonapi_types import JSONAPIDocument
from .util import is_valid_resource

# sentinel for members that aren't present, None is a valid value for "data"
MISSING = object()


class ValidationResult(NamedTuple):
    is_valid: bool
    errors: List[str]
    document: Optional[JSONAPIDocument] = None

    def raise_for_errors(self) -> None:
        """
        :raises StructuralValidationError: when the document contains violations
        """
        if not self.is_valid:
            raise StructuralValidationError(self.errors)


def _is_object(value: Any) -> bool:
    return isinstance(value, dict)


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _prefixed(prefix: str, errors: List[str]) -> Iterator[str]:
    for error in errors:
        yield f"{prefix}: {error}"


def validate_document(doc: Any) -> ValidationResult:
    """
    Validate the top level document and all the resources, relationships and errors it contains
    :param doc: decoded json document
    :return: ValidationResult, document is set when the document is valid
    """
    if not _is_object(doc):
        return ValidationResult(False, ["Document must be an object"])

    errors: List[str] = []
    data = doc.get("data", MISSING)
    doc_errors = doc.get("errors", MISSING)
    meta = doc.get("meta", MISSING)
    jsonapi = doc.get("jsonapi", MISSING)
    links = doc.get("links", MISSING)
    included = doc.get("included", MISSING)

    if data is MISSING and doc_errors is MISSING and meta is MISSING:
        errors.append("Document must contain at least one of: data, errors, or meta")

    if data is not MISSING and doc_errors is not MISSING:
        errors.append("Document cannot contain both data and errors")

    if jsonapi is not MISSING:
        if not _is_object(jsonapi):
            errors.append("jsonapi member must be an object")
        else:
            version = jsonapi.get("version", MISSING)
            jsonapi_meta = jsonapi.get("meta", MISSING)
            if version is not MISSING and not isinstance(version, str):
                errors.append("jsonapi.version must be a string")
            if jsonapi_meta is not MISSING and not _is_object(jsonapi_meta):
                errors.append("jsonapi.meta must be an object")

    if links is not MISSING and not _is_object(links):
        errors.append("links must be an object")

    if meta is not MISSING and not _is_object(meta):
        errors.append("meta must be an object")

    if data is not MISSING:
        if isinstance(data, list):
            for index, resource in enumerate(data):
                errors.extend(_prefixed(f"data[{index}]", validate_resource_object(resource)))
        elif data is not None:
            errors.extend(_prefixed("data", validate_resource_object(data)))

    if included is not MISSING:
        if not isinstance(included, list):
            errors.append("included must be an array")
        else:
            for index, resource in enumerate(included):
                errors.extend(_prefixed(f"included[{index}]", validate_resource_object(resource)))

    if doc_errors is not MISSING:
        if not isinstance(doc_errors, list):
            errors.append("errors must be an array")
        else:
            for index, error in enumerate(doc_errors):
                errors.extend(_prefixed(f"errors[{index}]", validate_error_object(error)))

    if errors:
        return ValidationResult(False, errors)
    return ValidationResult(True, errors, doc)


def validate_or_raise(doc: Any) -> JSONAPIDocument:
    """
    :return: the validated document
    :raises StructuralValidationError: with all violations found in doc
    """
    result = validate_document(doc)
    result.raise_for_errors()
    return result.document


def validate_resource_object(resource: Any) -> List[str]:
    """
    :param resource: resource object from "data" or "included"
    :return: list of violations
    """
    if not _is_object(resource):
        return ["Resource must be an object"]

    errors: List[str] = []

    if not _is_non_empty_string(resource.get("type")):
        errors.append("Resource must have a non-empty string type")

    if not _is_non_empty_string(resource.get("id")):
        errors.append("Resource must have a non-empty string id")

    attributes = resource.get("attributes", MISSING)
    if attributes is not MISSING and not _is_object(attributes):
        errors.append("attributes must be an object")

    relationships = resource.get("relationships", MISSING)
    if relationships is not MISSING:
        if not _is_object(relationships):
            errors.append("relationships must be an object")
        else:
            for key, relationship in relationships.items():
                errors.extend(_prefixed(f"relationships.{key}", validate_relationship_object(relationship)))

    links = resource.get("links", MISSING)
    if links is not MISSING and not _is_object(links):
        errors.append("links must be an object")

    meta = resource.get("meta", MISSING)
    if meta is not MISSING and not _is_object(meta):
        errors.append("meta must be an object")

    return errors


def validate_relationship_object(relationship: Any) -> List[str]:
    """
    A relationship object must contain at least one of data, links or meta.
    data is null (empty to-one), a resource identifier (to-one) or a list of identifiers (to-many)
    :return: list of violations
    """
    if not _is_object(relationship):
        return ["Relationship must be an object"]

    errors: List[str] = []
    data = relationship.get("data", MISSING)
    links = relationship.get("links", MISSING)
    meta = relationship.get("meta", MISSING)

    if data is MISSING and links is MISSING and meta is MISSING:
        errors.append("Relationship must contain at least one of: data, links, or meta")

    if data is not MISSING and data is not None:
        if isinstance(data, list):
            for index, identifier in enumerate(data):
                errors.extend(_prefixed(f"data[{index}]", validate_resource_identifier(identifier)))
        else:
            errors.extend(_prefixed("data", validate_resource_identifier(data)))

    if links is not MISSING and not _is_object(links):
        errors.append("links must be an object")

    if meta is not MISSING and not _is_object(meta):
        errors.append("meta must be an object")

    return errors


def validate_resource_identifier(identifier: Any) -> List[str]:
    """
    :return: list of violations
    """
    if not _is_object(identifier):
        return ["Resource identifier must be an object"]

    errors: List[str] = []

    if not _is_non_empty_string(identifier.get("type")):
        errors.append("Resource identifier must have a non-empty string type")

    if not _is_non_empty_string(identifier.get("id")):
        errors.append("Resource identifier must have a non-empty string id")

    meta = identifier.get("meta", MISSING)
    if meta is not MISSING and not _is_object(meta):
        errors.append("meta must be an object")

    return errors


def validate_error_object(error: Any) -> List[str]:
    """
    https://jsonapi.org/format/#error-objects
    :return: list of violations
    """
    if not _is_object(error):
        return ["Error must be an object"]

    errors: List[str] = []

    for member in ("id", "status", "code", "title", "detail"):
        value = error.get(member, MISSING)
        if value is not MISSING and not isinstance(value, str):
            errors.append(f"error.{member} must be a string")

    for member in ("links", "source", "meta"):
        value = error.get(member, MISSING)
        if value is not MISSING and not _is_object(value):
            errors.append(f"error.{member} must be an object")

    return errors


def base_check(doc: Any) -> bool:
    """
    Minimal check performed before every parse
    :return: False if doc isn't an object, has none of data/errors/meta or was already parsed
    """
    if not doc or not _is_object(doc):
        return False

    if "data" not in doc and "errors" not in doc and "meta" not in doc:
        return False

    jsonapi = doc.get("jsonapi")
    if _is_object(jsonapi) and jsonapi.get("parsed"):
        return False

    return True


def validate_resource(resource: Any) -> bool:
    """
    :return: True if resource is an object with a non-empty string type and a string or numeric id,
        cfr. util.is_valid_resource()
    """
    return _is_object(resource) and is_valid_resource(resource)


def validate_relationship(relationship: Any) -> bool:
    """
    :return: True if relationship is an object with at least one of data, links or meta
    """
    if not _is_object(relationship):
        return False
    return "data" in relationship or "links" in relationship or "meta" in relationship
