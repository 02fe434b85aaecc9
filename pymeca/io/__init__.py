from pymeca.io.capture import start_capture, stop_capture
from pymeca.io.errors import ValidationError
from pymeca.io.io import IOBase
from pymeca.io.socket import Socket, SocketValidator
from pymeca.io.validation import end_validation, validate
