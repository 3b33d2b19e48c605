#
from typing import Any, Callable


class classproperty:
    """
    Read-only property evaluated on the class, eg. `Resource.type`:

        class User(Resource):
            pass

        User.type == User().type == "user"

    Assigning the property on an instance raises AttributeError
    """

    def __init__(self, fget: Callable[[type], Any]) -> None:
        self.fget = fget
        self.__doc__ = fget.__doc__

    def __get__(self, obj: Any, klass: type = None) -> Any:
        if klass is None:
            klass = type(obj)
        return self.fget(klass)

    def __set__(self, obj: Any, value: Any) -> None:
        raise AttributeError(f"'{type(obj).__name__}.{self.fget.__name__}' is read-only")
