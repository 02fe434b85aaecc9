import asyncio
import enum
import logging
from typing import List, Optional, Sequence, Union

from pymeca.arms.meca500.errors import (
  MalformedFrameError,
  Meca500ConnectionError,
  describe_error,
)
from pymeca.arms.meca500.protocol import (
  ALREADY_CONNECTED,
  CONNECTED,
  RESET_ERROR_CONFIRMATIONS,
  TERMINATOR,
  Argument,
  DecodedBody,
  answer_codes,
  build_command,
  decode_response_body,
  encode,
  is_error_code,
  parse_response,
)
from pymeca.io.socket import Socket
from pymeca.machines.backend import MachineBackend

logger = logging.getLogger(__name__)


class CommandStatus(enum.Enum):
  """Result of a command that did not wait for a reply."""

  QUEUEING = "queueing"
  IN_ERROR_MODE = "in_error_mode"


CommandResult = Union[DecodedBody, CommandStatus]


class Meca500Backend(MachineBackend):
  """Session with a Meca500 robot over its TCP control port.

  The session owns one connection and the flags that change how commands are exchanged:

  - `eob`: the robot acknowledges every executed block.
  - `eom`: the robot acknowledges the end of every movement.
  - `queueing`: commands are sent without waiting for their reply, so that moves can be blended.
    Replies pile up on the connection and the next command that does wait reads the oldest one,
    not its own.
  - `error_mode`: the robot reported an error. No command is sent until the mode is cleared.

  Commands are exchanged one at a time. A lock covers the error mode check, the send and the
  receive of a command, so concurrent callers never read each other's replies (except for the
  queued replies described above, which the protocol cannot tell apart).
  """

  def __init__(
    self,
    host: str = "192.168.0.100",
    port: int = 10000,
    connect_timeout: float = 10,
    handshake_timeout: float = 10,
  ) -> None:
    super().__init__()
    self.host = host
    self.port = port
    self.connect_timeout = connect_timeout
    self.handshake_timeout = handshake_timeout
    self.io = Socket(
      host=host,
      port=port,
      read_timeout=None,
      connect_timeout=connect_timeout,
    )
    self._lock = asyncio.Lock()
    self._reset_flags()

  def _reset_flags(self):
    self.eob = True
    self.eom = True
    self.queueing = False
    self.saved_eom: Optional[bool] = None
    self.error_mode = False

  def serialize(self) -> dict:
    return {
      **super().serialize(),
      "host": self.host,
      "port": self.port,
      "connect_timeout": self.connect_timeout,
      "handshake_timeout": self.handshake_timeout,
    }

  async def setup(self):
    """Connect to the robot and wait for its welcome frame.

    Raises:
      Meca500ConnectionError: if the connection cannot be opened, the welcome frame does not
        arrive in time or is malformed, another client is already connected or the welcome code is
        unexpected.
    """
    try:
      await self.io.setup()
    except (OSError, asyncio.TimeoutError) as e:
      raise Meca500ConnectionError(f"Cannot connect to {self.host}:{self.port}: {e!r}") from e

    try:
      frame = await self.io.readuntil(TERMINATOR, timeout=self.handshake_timeout)
    except (OSError, asyncio.TimeoutError, asyncio.IncompleteReadError) as e:
      await self.io.stop()
      raise Meca500ConnectionError(
        f"No welcome frame from {self.host}:{self.port}: {e!r}"
      ) from e

    try:
      code, body = parse_response(frame)
    except MalformedFrameError as e:
      await self.io.stop()
      raise Meca500ConnectionError(f"Malformed welcome frame from {self.host}:{self.port}") from e

    if code != CONNECTED:
      await self.io.stop()
      if code == ALREADY_CONNECTED:
        raise Meca500ConnectionError(
          f"Another client is already connected to {self.host}:{self.port}", code=code
        )
      raise Meca500ConnectionError(f"Unexpected welcome frame [{code}][{body}]", code=code)

    self._reset_flags()
    logger.info("Connected to Meca500 at %s:%d: %s", self.host, self.port, body)

  async def stop(self):
    await self.io.stop()
    logger.info("Disconnected from Meca500 at %s:%d", self.host, self.port)

  async def run(self, command: str, args: Optional[Sequence[Argument]] = None) -> CommandResult:
    """Send a command and return the decoded reply.

    Returns:
      `CommandStatus.IN_ERROR_MODE` without sending anything if the session is in error mode,
      `CommandStatus.QUEUEING` right after sending if queueing is enabled, otherwise the decoded
      body of the next reply frame.

    Raises:
      MalformedFrameError: if the reply is not a valid frame.
      DecodeError: if a numeric reply body contains something that is not a number.
      Meca500ConnectionError: if the connection fails or the robot closes it before replying.
    """
    cmd = build_command(command, args)
    async with self._lock:
      return await self._exchange(cmd)

  async def _exchange(self, cmd: str) -> CommandResult:
    """Send `cmd` and receive its reply. The caller holds `_lock`."""
    if self.error_mode:
      logger.warning("Not sending %s, the robot is in error mode", cmd)
      return CommandStatus.IN_ERROR_MODE

    try:
      await self.io.write(encode(cmd))
    except OSError as e:
      raise Meca500ConnectionError(
        f"Cannot send {cmd} to {self.host}:{self.port}: {e!r}"
      ) from e

    if self.queueing:
      logger.debug("Queued %s", cmd)
      return CommandStatus.QUEUEING

    try:
      frame = await self.io.readuntil(TERMINATOR)
    except asyncio.IncompleteReadError as e:
      raise Meca500ConnectionError(
        f"Connection to {self.host}:{self.port} closed while waiting for the reply to {cmd}"
      ) from e
    except OSError as e:
      raise Meca500ConnectionError(
        f"Connection to {self.host}:{self.port} failed while waiting for the reply to {cmd}: {e!r}"
      ) from e

    code, body = parse_response(frame)
    decoded = decode_response_body(code, body)

    if is_error_code(code):
      self.error_mode = True
      logger.error("%s failed with [%d][%s]: %s", cmd, code, body, describe_error(code))

    return decoded

  async def set_eob(self, e: Union[bool, int]) -> CommandResult:
    """Enable (1) or disable (0) end of block answers."""
    self.eob = bool(e)
    return await self.run("SetEOB", [int(e)])

  async def set_eom(self, e: Union[bool, int]) -> CommandResult:
    """Enable (1) or disable (0) end of movement answers."""
    self.eom = bool(e)
    return await self.run("SetEOM", [int(e)])

  async def set_queue(self, e: Union[bool, int]) -> bool:
    """Enable (1) or disable (0) queueing of commands, for blending moves.

    While queueing, EOM is disabled on the robot. The EOM setting from before queueing was enabled
    is restored when it is disabled again. The `SetEOM` commands themselves are sent without
    waiting for a reply.

    Returns:
      Whether queueing is now enabled.
    """
    if e:
      self.saved_eom = self.eom
      self.queueing = True
      await self.set_eom(False)
    else:
      self.queueing = False
      restored = self.saved_eom if self.saved_eom is not None else self.eom
      await self.set_eom(restored)
    return self.queueing

  async def reset_error(self) -> CommandResult:
    """Send `ResetError` and leave error mode if the robot confirms.

    `ResetError` is exchanged like every other command, so it is not sent while the session is
    already in error mode: in that case the result is `CommandStatus.IN_ERROR_MODE` and the session
    stays in error mode. Any reply that is not a confirmation, including `CommandStatus.QUEUEING`,
    puts the session in error mode.
    """
    async with self._lock:
      response = await self._exchange(build_command("ResetError"))
      self.error_mode = not (
        isinstance(response, str)
        and any(confirmation in response for confirmation in RESET_ERROR_CONFIRMATIONS)
      )
    return response

  def is_in_error_mode(self) -> bool:
    return self.error_mode

  def answer_codes(self, command: str) -> List[int]:
    """The response codes `command` may be answered with under the current EOB/EOM settings."""
    return answer_codes(command, eob=self.eob, eom=self.eom)
