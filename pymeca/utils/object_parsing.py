from typing import Optional, Type, TypeVar

T = TypeVar("T")


def find_subclass(class_name: str, cls: Type[T]) -> Optional[Type[T]]:
  """Find `cls` or one of its (indirect) subclasses by class name.

  Used to turn the `type` field of a serialized backend back into a class.

  Returns:
    The class with the given name, or `None` if there is no such class.
  """

  if cls.__name__ == class_name:
    return cls
  for subclass in cls.__subclasses__():
    found = find_subclass(class_name=class_name, cls=subclass)
    if found is not None:
      return found
  return None
