# Parser exceptions
#
# Only a few conditions are real errors, cycles and the depth limit are handled
# by returning truncated references (cfr. resolver.py).
#
# Whether these exceptions reach the caller depends on the parser mode:
# - development: the exception is logged and re-raised
# - production: the exception is logged and the unparsed input is returned
#
import jsonapi_flatten


class JsonapiError(Exception):
    """
    Base class for all parser errors
    """

    message = "JSON:API Error: "

    def __init__(self, message=""):
        self.message = self.message + str(message)
        super().__init__(self.message)


class StructuralValidationError(JsonapiError):
    """
    This exception is raised when a document does not follow the JSON:API document grammar.
    All violations are collected before the exception is created
    """

    message = "Validation Error: "

    def __init__(self, errors):
        """
        :param errors: list of path-prefixed validation messages
        """
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))
        jsonapi_flatten.log.warning("StructuralValidationError: %d violation(s)", len(self.errors))


class InvalidResourceError(JsonapiError, ValueError):
    """
    This exception is raised when a resource without a valid type or id has to be flattened
    """

    message = "Invalid Resource: "

    def __init__(self, message="", resource=None):
        """
        :param message: description of the problem
        :param resource: the offending resource object
        """
        self.resource = resource
        super().__init__(message)
        jsonapi_flatten.log.error("InvalidResourceError: %s", message)


class ConfigurationError(JsonapiError, TypeError):
    """
    This exception is raised when the parse configuration contains invalid values
    """

    message = "Configuration Error: "

    def __init__(self, message=""):
        super().__init__(message)
        jsonapi_flatten.log.error("ConfigurationError: %s", message)
