import inspect
import weakref
from abc import ABC, abstractmethod

from pymeca.utils.object_parsing import find_subclass


class MachineBackend(ABC):
  """Connection to one machine.

  A :class:`~pymeca.machines.machine.Machine` frontend delegates to its backend. Backends can be
  saved with `serialize` and recreated with `deserialize`, and every live backend is tracked so that
  a capture can be validated against all of them.
  """

  _instances: "weakref.WeakSet[MachineBackend]" = weakref.WeakSet()

  def __init__(self):
    MachineBackend._instances.add(self)

  @abstractmethod
  async def setup(self):
    """Open the connection to the machine."""

  @abstractmethod
  async def stop(self):
    """Close the connection to the machine."""

  def serialize(self) -> dict:
    """The constructor arguments of this backend, plus its class name under `type`."""
    return {"type": type(self).__name__}

  @classmethod
  def deserialize(cls, data: dict) -> "MachineBackend":
    """Create the backend described by the output of `serialize`.

    Raises:
      ValueError: if `type` does not name a concrete subclass of `cls`.
    """
    kwargs = dict(data)
    class_name = kwargs.pop("type")
    subclass = find_subclass(class_name, cls=cls)
    if subclass is None or inspect.isabstract(subclass):
      raise ValueError(f"No concrete {cls.__name__} named {class_name!r}")
    return subclass(**kwargs)

  @classmethod
  def get_all_instances(cls) -> "weakref.WeakSet[MachineBackend]":
    return cls._instances
