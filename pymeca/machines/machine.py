from __future__ import annotations

import functools
import sys
from abc import ABC
from typing import Any, Awaitable, Callable, TypeVar

from pymeca.machines.backend import MachineBackend

if sys.version_info < (3, 10):
  from typing_extensions import ParamSpec
else:
  from typing import ParamSpec

_P = ParamSpec("_P")
_R = TypeVar("_R", bound=Awaitable[Any])


def need_setup_finished(func: Callable[_P, _R]) -> Callable[_P, _R]:
  """Refuse to call a Machine method before `setup` has completed.

  Raises:
    RuntimeError: if the machine is not set up.
  """

  @functools.wraps(func)
  async def wrapper(self: Machine, *args, **kwargs):
    if not self.setup_finished:
      raise RuntimeError(
        f"{type(self).__name__}.{func.__name__}() needs a connected machine, call setup() first"
      )
    return await func(self, *args, **kwargs)

  return wrapper  # type: ignore[return-value]


class Machine(ABC):
  """Frontend of a machine. Commands go through `backend`, which owns the connection.

  Use as an async context manager to set the machine up and stop it again:

    async with SomeMachine(backend=SomeBackend()) as machine:
      ...
  """

  def __init__(self, backend: MachineBackend):
    self.backend = backend
    self._setup_finished = False

  @property
  def setup_finished(self) -> bool:
    return self._setup_finished

  def serialize(self) -> dict:
    return {"backend": self.backend.serialize()}

  @classmethod
  def deserialize(cls, data: dict):
    kwargs = dict(data)
    kwargs["backend"] = MachineBackend.deserialize(kwargs["backend"])
    return cls(**kwargs)

  async def setup(self, **backend_kwargs):
    await self.backend.setup(**backend_kwargs)
    self._setup_finished = True

  async def stop(self):
    """Stop the backend. Stopping a machine that is not set up does nothing."""
    if not self._setup_finished:
      return
    await self.backend.stop()
    self._setup_finished = False

  async def __aenter__(self):
    await self.setup()
    return self

  async def __aexit__(self, exc_type, exc_value, traceback):
    await self.stop()
