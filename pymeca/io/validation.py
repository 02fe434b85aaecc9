import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from pymeca.io.capture import CaptureReader, capturer
from pymeca.io.socket import Socket, SocketValidator
from pymeca.machines.backend import MachineBackend

logger = logging.getLogger(__name__)

cr: Optional[CaptureReader] = None


def _replace_io(backend: MachineBackend, reader: CaptureReader) -> None:
  io = getattr(backend, "io")
  if isinstance(io, SocketValidator):
    io.cr = reader
  elif isinstance(io, Socket):
    data = io.serialize()
    data.pop("type")
    setattr(backend, "io", SocketValidator(cr=reader, **data))
  else:
    raise RuntimeError(f"Backend {backend} not supported for validation")


def validate(
  capture_file: Union[str, Path],
  backends: Optional[Iterable[MachineBackend]] = None,
):
  """Start validation against a capture file.

  The `Socket` of every backend gets replaced by a `SocketValidator`, which checks writes against
  the capture and replays the captured reads.

  Args:
    capture_file: path to the capture file. Generate with start_capture.
    backends: the backends to validate. Defaults to all live backends.
  """

  if capturer.capture_active:
    raise RuntimeError("Cannot validate while capture is active")

  global cr
  cr = CaptureReader(path=capture_file)

  if backends is None:
    backends = list(MachineBackend.get_all_instances())

  for machine_backend in backends:
    if not hasattr(machine_backend, "io"):
      logger.warning("Backend %s has no io, it will not be validated", machine_backend)
      continue
    _replace_io(machine_backend, cr)

  cr.start()


def end_validation():
  if cr is None:
    raise RuntimeError("Validation not started")
  cr.done()
