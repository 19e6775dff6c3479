#
# Helpers shared by the map builder, the resolver and the result builder
#
import copy
from numbers import Number
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class HybridMethodDescriptor:
    """
    Method that can be called on the class as well as on an instance
    When called on an instance, the instance method is used,
    when called on the class, the class method is used
    """

    def __init__(self, finstance: Callable, fclass: Optional[Callable] = None) -> None:
        self.finstance = finstance
        self.fclass = fclass
        self.__doc__ = finstance.__doc__

    def __get__(self, obj, klass=None):
        """
        __get__
        """
        if obj is None:
            if self.fclass is None:
                raise AttributeError(f"{self.finstance.__name__} can't be called on the class")
            return self.fclass.__get__(klass, type(klass))
        return self.finstance.__get__(obj, klass)

    def classmethod(self, func: Callable) -> "HybridMethodDescriptor":
        """
        register the implementation used when the method is called on the class
        """
        self.fclass = func
        return self


def hybridmethod(func: Callable) -> HybridMethodDescriptor:
    """
    hybridmethod
    """
    return HybridMethodDescriptor(func)


def generate_resource_key(resource: Mapping[str, Any]) -> str:
    """
    :param resource: resource object or resource identifier
    :return: the "{type}-{id}" key used in the resource map and the circular reference guard
    """
    return f"{resource.get('type')}-{resource.get('id')}"


def safe_assign(target: Dict[str, Any], *sources: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Copy the items of the sources onto target, later sources win.
    Sources that aren't mappings (None, lists, ...) are skipped
    :return: target
    """
    for source in sources:
        if isinstance(source, Mapping):
            for key, value in source.items():
                target[key] = value
    return target


def deep_clone(obj: T) -> T:
    """
    :return: a copy of obj that shares no containers with obj
    """
    return copy.deepcopy(obj)


def is_empty(obj: Any) -> bool:
    """
    None, empty strings and empty containers are empty. Numbers and booleans never are
    """
    if obj is None:
        return True
    if isinstance(obj, (str, list, tuple, dict, set)):
        return len(obj) == 0
    return False


def map_array(array: Iterable[T], mapper: Callable[[T], U]) -> List[U]:
    return [mapper(item) for item in array]


def is_valid_resource(resource: Any) -> bool:
    """
    Lightweight resource check used while flattening:
    the type must be a non-empty string, the id a string or number that isn't empty after conversion
    """
    if not isinstance(resource, Mapping):
        return False
    res_type = resource.get("type")
    res_id = resource.get("id")
    if not isinstance(res_type, str) or not res_type:
        return False
    if isinstance(res_id, bool) or not isinstance(res_id, (str, Number)):
        return False
    return len(str(res_id)) > 0


def extract_resource_identifier(resource: Mapping[str, Any]) -> Dict[str, Any]:
    """
    :return: {"type": .., "id": ..} of the resource, with "meta" if the resource has it
    """
    result = {"type": resource.get("type"), "id": resource.get("id")}
    if resource.get("meta"):
        result["meta"] = deep_clone(resource["meta"])
    return result
