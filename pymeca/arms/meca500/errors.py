from typing import Dict, Optional

ERROR_MESSAGES: Dict[int, str] = {
  1000: "Command buffer is full.",
  1001: "Empty command or command unrecognized.",
  1002: "Syntax error, symbol missing.",
  1003: "Argument error.",
  1005: "The robot is not activated.",
  1006: "The robot is not homed.",
  1007: "Joint over limit.",
  1010: "Linear move is blocked because a joint would rotate by more than 180 degrees.",
  1011: "The robot is in error.",
  1012: "Linear move is blocked because it would cross a singularity.",
  1013: "Activation failed.",
  1014: "Homing failed.",
  1016: "Destination pose out of reach.",
  1022: "Robot was not saving the program.",
  1023: "Ignoring command for offline mode.",
  1024: "Mastering needed.",
  1025: "Impossible to reset the error. Please, power-cycle the robot.",
  1026: "Deactivation needed to execute the command.",
  1027: "Simulation mode can only be enabled/disabled while the robot is deactivated.",
  3001: "Another user is already connected, closing connection.",
  3003: "Command has reached the maximum length.",
  3005: "Error of motion.",
  3009: "Robot initialization failed due to an internal error. Restart the robot.",
  3014: "Problem with saved program, save a new program.",
  3026: "Robot's maintenance check has discovered a problem. Contact the manufacturer.",
}


def describe_error(code: int) -> str:
  """Human readable text for a device error code, or a generic one for codes not in the table."""
  return ERROR_MESSAGES.get(code, f"Unknown error code {code}.")


class Meca500Error(Exception):
  """Base class for errors raised by the Meca500 client."""


class Meca500ConnectionError(Meca500Error):
  """The connection to the robot could not be established or was lost.

  Attributes:
    code: the response code of the handshake frame, if one was received.
  """

  def __init__(self, message: str, code: Optional[int] = None):
    super().__init__(message)
    self.code = code


class MalformedFrameError(Meca500Error):
  """A reply frame does not have the `[dddd][body]` shape."""

  def __init__(self, frame, reason: str):
    super().__init__(f"Malformed frame {frame!r}: {reason}")
    self.frame = frame


class DecodeError(Meca500Error):
  """The body of a numeric response contains a segment that is not a number."""

  def __init__(self, code: int, body: str, segment: str):
    super().__init__(f"Cannot decode body {body!r} of response {code}: {segment!r} is not a number")
    self.code = code
    self.body = body
