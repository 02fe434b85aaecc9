class ValidationError(Exception):
  """Raised when IO during validation does not match the capture file."""
