"""Recording of the IO of a session, and replay of such a recording.

A capture file is JSON: the PyMeca version and the list of IO commands in the order they
happened. Each command names its `module` (the kind of IO), the `device_id` it went to, the
`action` and its hex encoded `data`.

While a capture or a validation runs, no new IO objects may be created: they would not be part
of the recording.
"""

import dataclasses
import json
import logging
from pathlib import Path
from typing import List, Optional, Union

from pymeca.__version__ import __version__
from pymeca.io.errors import ValidationError

logger = logging.getLogger(__name__)

_capture_or_validation_active = False


def get_capture_or_validation_active() -> bool:
  return _capture_or_validation_active


def _set_capture_or_validation_active(active: bool):
  global _capture_or_validation_active
  _capture_or_validation_active = active


@dataclasses.dataclass
class Command:
  module: str
  device_id: str
  action: str


class _CaptureWriter:
  """Collects recorded commands and writes them to the capture file on `stop`."""

  def __init__(self):
    self._path: Optional[Path] = None
    self._commands: List[dict] = []

  @property
  def capture_active(self) -> bool:
    return self._path is not None

  def start(self, path: Path):
    if self.capture_active:
      raise RuntimeError(f"Already capturing to {self._path}")
    self._path = path
    self._commands = []
    _set_capture_or_validation_active(True)

  def record(self, command: Command):
    if self.capture_active:
      self._commands.append(dataclasses.asdict(command))

  def stop(self):
    if self._path is None:
      raise RuntimeError("No capture running, call start_capture() first")
    path, commands = self._path, self._commands
    self._path = None
    self._commands = []
    _set_capture_or_validation_active(False)

    with open(path, "w", encoding="utf-8") as f:
      json.dump({"version": __version__, "commands": commands}, f, indent=2)
    logger.info("Wrote %d captured commands to %s", len(commands), path)


class CaptureReader:
  """Hands out the commands of a capture file in the order they were recorded."""

  def __init__(self, path: Union[str, Path]):
    self.path = Path(path)
    with open(self.path, "r", encoding="utf-8") as f:
      self.commands: List[dict] = json.load(f)["commands"]
    self._next = 0

  def start(self):
    self._next = 0
    _set_capture_or_validation_active(True)

  def next_command(self) -> dict:
    if self._next >= len(self.commands):
      raise ValidationError(f"All {len(self.commands)} commands of {self.path} replayed, got more IO")
    command = self.commands[self._next]
    self._next += 1
    return command

  def done(self):
    """End the replay.

    Raises:
      ValidationError: if the session did less IO than was captured.
    """
    left = self.commands[self._next:]
    self.reset()
    if left:
      raise ValidationError(
        f"{len(left)} commands of {self.path} were not replayed, the first one is {left[0]}"
      )
    logger.info("Session matches %s", self.path)

  def reset(self):
    self._next = 0
    _set_capture_or_validation_active(False)


capturer = _CaptureWriter()


def start_capture(fp: Union[Path, str] = Path("./validation.json")):
  """Record all socket IO until `stop_capture` and write it to `fp`."""
  fp = Path(fp)
  if fp.is_dir():
    raise ValueError(f"{fp} is a directory, expected a file path")
  capturer.start(fp)


def stop_capture():
  """Stop recording and write the capture file."""
  capturer.stop()
