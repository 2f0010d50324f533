from typing import Any, Callable

__all__ = ["LazyProperty"]


class LazyProperty(property):
    """
    A `descriptor`_ exposing a method as a lazily evaluated attribute. It is
    intended to be used as a decorator.

    The method is called on the first access and the value is stored in the
    instance's ``__dict__`` under the same name. Deleting the attribute drops
    the stored value so that the next access calls the method again, and
    assigning to the attribute replaces the stored value (useful e.g. for
    substituting mocks in tests).

    .. _`descriptor`: https://docs.python.org/3/howto/descriptor.html
    """

    def __init__(self, func: Callable[[Any], Any]) -> None:
        super().__init__(func)
        self.func = func
        self.name = func.__name__
        self.__doc__ = func.__doc__

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Any, owner: type | None = None, /) -> Any:
        if instance is None:
            return self
        try:
            return instance.__dict__[self.name]
        except KeyError:
            value = instance.__dict__[self.name] = self.func(instance)
            return value

    def __set__(self, instance: Any, value: Any) -> None:
        instance.__dict__[self.name] = value

    def __delete__(self, instance: Any) -> None:
        instance.__dict__.pop(self.name, None)
