import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from pymeca.io.capture import Command, capturer, get_capture_or_validation_active
from pymeca.io.errors import ValidationError
from pymeca.io.io import IOBase
from pymeca.io.validation_utils import LOG_LEVEL_IO, align_sequences

if TYPE_CHECKING:
  from pymeca.io.capture import CaptureReader


logger = logging.getLogger(__name__)


@dataclass
class SocketCommand(Command):
  data: str

  def __init__(self, device_id: str, action: str, data: str, module: str = "socket"):
    super().__init__(module=module, device_id=device_id, action=action)
    self.data = data


class Socket(IOBase):
  """IO for reading/writing to a TCP socket.

  Args:
    host: hostname or IP address of the peer.
    port: TCP port of the peer.
    read_timeout: default timeout for reads in seconds. `None` waits forever.
    write_timeout: default timeout for draining writes in seconds.
    connect_timeout: timeout for opening the connection in seconds. `None` waits forever.
  """

  def __init__(
    self,
    host: str,
    port: int,
    read_timeout: Optional[float] = 30,
    write_timeout: float = 30,
    connect_timeout: Optional[float] = None,
  ):
    self._host = host
    self._port = port
    self._reader: Optional[asyncio.StreamReader] = None
    self._writer: Optional[asyncio.StreamWriter] = None
    self._read_timeout = read_timeout
    self._write_timeout = write_timeout
    self._connect_timeout = connect_timeout
    self._unique_id = f"{self._host}:{self._port}"
    self._read_lock = asyncio.Lock()
    self._write_lock = asyncio.Lock()

    if get_capture_or_validation_active():
      raise RuntimeError("Cannot create a new Socket object while capture or validation is active")

  @property
  def connected(self) -> bool:
    return self._writer is not None

  async def setup(self):
    self._reader, self._writer = await asyncio.wait_for(
      asyncio.open_connection(self._host, self._port), timeout=self._connect_timeout
    )
    logger.info("Connected to socket %s:%s", self._host, self._port)

  async def stop(self):
    async with self._read_lock, self._write_lock:
      self._reader = None
      if self._writer is None:
        return

      logger.info("Closing connection to socket %s:%s", self._host, self._port)

      try:
        self._writer.close()
        await self._writer.wait_closed()
      except OSError as e:
        logger.warning("Error while closing socket connection: %s", e)
      finally:
        self._writer = None

  def serialize(self):
    return {
      **super().serialize(),
      "host": self._host,
      "port": self._port,
      "read_timeout": self._read_timeout,
      "write_timeout": self._write_timeout,
      "connect_timeout": self._connect_timeout,
    }

  @classmethod
  def deserialize(cls, data: dict) -> "Socket":
    kwargs = {}
    for key in ("read_timeout", "write_timeout", "connect_timeout"):
      if key in data:
        kwargs[key] = data[key]
    return cls(
      host=data["host"],
      port=data["port"],
      **kwargs,
    )

  async def write(self, data: bytes, timeout: Optional[float] = None) -> None:
    """Send `data` and wait until it is flushed to the peer. Not retried on timeout or error."""
    assert self._writer is not None, "Socket is not connected, call setup() first"

    async with self._write_lock:
      self._writer.write(data)
      logger.log(LOG_LEVEL_IO, "[%s:%d] write %s", self._host, self._port, data)
      capturer.record(
        SocketCommand(
          device_id=self._unique_id,
          action="write",
          data=data.hex(),
        )
      )
      try:
        await asyncio.wait_for(
          self._writer.drain(), timeout=self._write_timeout if timeout is None else timeout
        )
      except OSError as e:
        logger.error("write error: %r", e)
        raise

  async def readuntil(self, separator: bytes = b"\n", timeout: Optional[float] = None) -> bytes:
    """Receive everything up to and including the next `separator`.

    Raises:
      asyncio.TimeoutError: if `separator` does not arrive within the timeout. `None` uses the
        default read timeout, which may itself be `None` for no timeout.
      asyncio.IncompleteReadError: if the peer closes the connection before `separator` arrives.
    """
    assert self._reader is not None, "Socket is not connected, call setup() first"
    async with self._read_lock:
      data = await asyncio.wait_for(
        self._reader.readuntil(separator),
        timeout=self._read_timeout if timeout is None else timeout,
      )
      logger.log(LOG_LEVEL_IO, "[%s:%d] read %s", self._host, self._port, data)
      capturer.record(
        SocketCommand(
          device_id=self._unique_id,
          action="readuntil:" + separator.hex(),
          data=data.hex(),
        )
      )
      return data


class SocketValidator(Socket):
  """Socket that replays a capture file instead of talking to a peer."""

  def __init__(
    self,
    cr: "CaptureReader",
    host: str,
    port: int,
    read_timeout: Optional[float] = 30,
    write_timeout: float = 30,
    connect_timeout: Optional[float] = None,
  ):
    super().__init__(
      host=host,
      port=port,
      read_timeout=read_timeout,
      write_timeout=write_timeout,
      connect_timeout=connect_timeout,
    )
    self.cr = cr

  @property
  def connected(self) -> bool:
    return True

  async def setup(self):
    return

  async def stop(self):
    return

  def _next_command(self, action: str) -> SocketCommand:
    next_command = SocketCommand(**self.cr.next_command())
    if not (
      next_command.module == "socket"
      and next_command.device_id == self._unique_id
      and next_command.action == action
    ):
      raise ValidationError(
        f"Expected socket {action} command for {self._unique_id}, "
        f"got {next_command.module} {next_command.action} for {next_command.device_id}"
      )
    return next_command

  async def write(self, data: bytes, *args, **kwargs):
    """Validate write command against captured data."""
    next_command = self._next_command("write")
    expected = bytes.fromhex(next_command.data)
    if expected != data:
      aligned_expected, aligned_actual, markers = align_sequences(
        expected.decode("ascii", errors="replace"), data.decode("ascii", errors="replace")
      )
      raise ValidationError(
        "Socket write data mismatch.\n"
        f"expected: {aligned_expected}\n"
        f"actual:   {aligned_actual}\n"
        f"          {markers}"
      )

  async def readuntil(self, separator: bytes = b"\n", *args, **kwargs) -> bytes:
    """Return captured readuntil data for validation."""
    return bytes.fromhex(self._next_command("readuntil:" + separator.hex()).data)
