"""Wire format of the Meca500 ASCII command protocol.

A request frame is the command name, optionally followed by its comma separated arguments in
parentheses, terminated by a null byte: `MoveLin(170,-50,150,0,90,0)\\0`. A reply frame is a four
digit response code and a body, both in brackets, terminated by a null byte: `[2026][1.0,2.0]\\0`.

Everything in this module is pure: the session state lives in
:class:`~pymeca.arms.meca500.backend.Meca500Backend`.
"""

import re
from typing import Dict, FrozenSet, List, Optional, Pattern, Sequence, Tuple, Union

from pymeca.arms.meca500.errors import DecodeError, MalformedFrameError

Argument = Union[int, float, str]
DecodedBody = Union[List[float], List[int], str]

TERMINATOR = b"\0"
CODE_WIDTH = 4

CONNECTED = 3000
ALREADY_CONNECTED = 3001
EOM_ACK = 3004
EOB_ACK = 3012
MOTION_PAUSED = 2042

# Shape of the body per response code. Codes not listed have a plain string body.
BODY_TYPES: Dict[int, type] = {
  2026: float,  # GetJoints
  2027: float,  # GetPose
  2007: int,  # GetStatusRobot
  2029: int,  # GetConf
  2079: int,  # GetStatusGripper
}

FLOAT_RESPONSE_CODES: FrozenSet[int] = frozenset(c for c, t in BODY_TYPES.items() if t is float)
INTEGER_RESPONSE_CODES: FrozenSet[int] = frozenset(c for c, t in BODY_TYPES.items() if t is int)

# A numeric segment is plain ASCII: an optional minus sign, digits and, for floats, a fraction.
SEGMENT_PATTERNS: Dict[type, Pattern[str]] = {
  float: re.compile(r"-?[0-9]+(\.[0-9]+)?"),
  int: re.compile(r"-?[0-9]+"),
}

# Commands whose possible answers do not depend on the EOB/EOM settings.
STATIC_ANSWER_CODES: Dict[str, Tuple[int, ...]] = {
  "ActivateRobot": (2000, 2001),
  "ActivateSim": (2045,),
  "ClearMotion": (2044,),
  "DeactivateRobot": (2004,),
  "BrakesOn": (2010,),
  "BrakesOff": (2008,),
  "GetConf": (2029,),
  "GetJoints": (2026,),
  "GetStatusRobot": (2007,),
  "GetStatusGripper": (2079,),
  "GetPose": (2027,),
  "Home": (2002, 2003),
  "ResetError": (2005, 2006),
  "ResumeMotion": (2043,),
  "SetEOB": (2054, 2055),
  "SetEOM": (2052, 2053),
}

# Commands acknowledged with an end of movement answer while EOM is enabled.
EOM_COMMANDS: FrozenSet[str] = frozenset(
  {
    "MoveJoints",
    "MoveLin",
    "MoveLinRelTRF",
    "MoveLinRelWRF",
    "MovePose",
    "SetCartAcc",
    "SetJointAcc",
    "SetTRF",
    "SetWRF",
  }
)

COMMAND_ERROR_CODES = range(1000, 2000)
GENERAL_ERROR_CODES: FrozenSet[int] = frozenset({3001, 3003, 3005, 3009, 3014, 3026})

# Bodies of a ResetError reply that mean the robot is no longer in error.
RESET_ERROR_CONFIRMATIONS = ("The error was reset", "There was no error to reset")


def _format_argument(arg: Argument) -> str:
  if isinstance(arg, bool):
    return str(int(arg))
  return str(arg)


def build_command(command: str, args: Optional[Sequence[Argument]] = None) -> str:
  """Build the text of a command from its name and arguments.

  Arguments are not validated, range checks are done by the robot.

  Examples:
    >>> build_command("Home")
    'Home'
    >>> build_command("MoveLin", [170, -50, 150, 0, 90, 0])
    'MoveLin(170,-50,150,0,90,0)'
  """
  if not args:
    return command
  return f"{command}({','.join(_format_argument(arg) for arg in args)})"


def encode(command: str) -> bytes:
  """Frame a command for the wire."""
  return command.encode("ascii") + TERMINATOR


def encode_reply(code: int, body: str) -> bytes:
  """Frame a reply the way the robot sends it."""
  return f"[{code:0{CODE_WIDTH}d}][{body}]".encode("utf-8") + TERMINATOR


def parse_response(frame: Union[bytes, str]) -> Tuple[int, str]:
  """Split a reply frame into its response code and body.

  A single trailing terminator is stripped. The code is read from the fixed offsets of a four
  digit code; wider codes would need a scan for the closing bracket instead.

  Raises:
    MalformedFrameError: if the frame is not shaped `[dddd][body]`.
  """
  if isinstance(frame, bytes):
    try:
      text = frame.decode("utf-8")
    except UnicodeDecodeError as e:
      raise MalformedFrameError(frame, "not valid UTF-8") from e
  else:
    text = frame

  if text.endswith("\0"):
    text = text[:-1]

  if len(text) < CODE_WIDTH + 4 or text[0] != "[" or text[5:7] != "][" or text[-1] != "]":
    raise MalformedFrameError(frame, "expected [dddd][body]")

  code = text[1:5]
  if not (code.isascii() and code.isdigit()):
    raise MalformedFrameError(frame, f"response code {code!r} is not {CODE_WIDTH} digits")

  return int(code), text[7:-1]


def decode_response_body(code: int, body: str) -> DecodedBody:
  """Decode a response body into the shape its code implies.

  Joint and pose queries decode to a list of floats, configuration and status queries to a list
  of ints. Any other code keeps its body as a string.

  Raises:
    DecodeError: if a segment of a numeric body is not a plain decimal number. `nan`, `inf`,
      digit separators, whitespace and non-ASCII digits are rejected.
  """
  body_type = BODY_TYPES.get(code)
  if body_type is None:
    return body

  pattern = SEGMENT_PATTERNS[body_type]
  values = []
  for segment in body.split(","):
    if pattern.fullmatch(segment) is None:
      raise DecodeError(code, body, segment)
    values.append(body_type(segment))
  return values


def answer_codes(command: str, eob: bool = False, eom: bool = False) -> List[int]:
  """The response codes the robot may answer `command` with, given the EOB and EOM settings.

  When both acknowledgements apply, the EOM code comes before the EOB code.
  """
  if command == "PauseMotion":
    return [MOTION_PAUSED, EOM_ACK] if eom else [MOTION_PAUSED]

  if command in STATIC_ANSWER_CODES:
    return list(STATIC_ANSWER_CODES[command])

  codes: List[int] = []
  if eob:
    codes.insert(0, EOB_ACK)
  if eom and command in EOM_COMMANDS:
    codes.insert(0, EOM_ACK)
  return codes


def is_error_code(code: int) -> bool:
  """Whether a response code reports an error, which puts the session in error mode."""
  return code in COMMAND_ERROR_CODES or code in GENERAL_ERROR_CODES
