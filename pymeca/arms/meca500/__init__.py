from pymeca.arms.meca500.backend import CommandStatus, Meca500Backend
from pymeca.arms.meca500.errors import (
  DecodeError,
  MalformedFrameError,
  Meca500ConnectionError,
  Meca500Error,
)
from pymeca.arms.meca500.meca500 import Meca500
