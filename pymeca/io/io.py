from abc import ABC, abstractmethod
from typing import Optional


class IOBase(ABC):
  """A byte stream to a device, read in separator terminated frames."""

  @property
  @abstractmethod
  def connected(self) -> bool:
    """Whether `setup` has opened the stream and `stop` has not closed it yet."""

  @abstractmethod
  async def setup(self):
    """Open the stream."""

  @abstractmethod
  async def stop(self):
    """Close the stream. Closing a closed stream does nothing."""

  @abstractmethod
  async def write(self, data: bytes, timeout: Optional[float] = None) -> None:
    """Send `data` in full."""

  @abstractmethod
  async def readuntil(self, separator: bytes, timeout: Optional[float] = None) -> bytes:
    """Receive up to and including the next `separator`."""

  def serialize(self) -> dict:
    return {"type": type(self).__name__}
