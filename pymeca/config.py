"""Module level configuration of PyMeca.

The configuration is read from the first `pymeca.ini` or `pymeca.json` found in the current
directory or one of its parents. Without such a file the defaults of :class:`Config` apply.
Only logging is configurable, for example:

  [logging]
  level = IO
  log_dir = logs

`level` is a standard logging level name or `IO`, which also logs every frame sent and received.
"""

import configparser
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from pymeca.io.validation_utils import LOG_LEVEL_IO

LOG_LEVELS = {
  "IO": LOG_LEVEL_IO,
  "DEBUG": logging.DEBUG,
  "INFO": logging.INFO,
  "WARNING": logging.WARNING,
  "ERROR": logging.ERROR,
  "CRITICAL": logging.CRITICAL,
}

CONFIG_EXTENSIONS = ("ini", "json")


@dataclass
class Config:
  """The configuration object for PyMeca."""

  @dataclass
  class Logging:
    level: int = logging.INFO
    log_dir: Optional[Path] = None

  logging: Logging = field(default_factory=Logging)

  @classmethod
  def from_dict(cls, d: dict) -> "Config":
    """Build a Config from the sections of a config file. Missing keys keep their defaults.

    Raises:
      ValueError: if the log level is not one of `LOG_LEVELS`.
    """
    log_section = d.get("logging", {})
    level_name = str(log_section.get("level", "INFO")).upper()
    if level_name not in LOG_LEVELS:
      raise ValueError(f"Unknown log level {level_name!r}, expected one of {', '.join(LOG_LEVELS)}")
    log_dir = log_section.get("log_dir")
    return cls(
      logging=cls.Logging(
        level=LOG_LEVELS[level_name],
        log_dir=Path(log_dir) if log_dir is not None else None,
      )
    )


def read_config(path: Union[str, Path]) -> Config:
  """Read a config file. `.json` files are parsed as JSON, anything else as INI."""
  path = Path(path)
  with open(path, "r", encoding="utf-8") as f:
    if path.suffix == ".json":
      return Config.from_dict(json.load(f))
    parser = configparser.ConfigParser()
    parser.read_file(f)
  return Config.from_dict({section: dict(parser[section]) for section in parser.sections()})


def find_config_file(
  base_name: str,
  cur_dir: Optional[Union[str, Path]] = None,
) -> Optional[Path]:
  """Find `base_name.ini` or `base_name.json` in `cur_dir` (default: the current directory) or the
  closest parent that has one. INI wins over JSON in the same directory."""
  start = Path(cur_dir) if cur_dir is not None else Path.cwd()
  for directory in (start, *start.parents):
    for extension in CONFIG_EXTENSIONS:
      candidate = directory / f"{base_name}.{extension}"
      if candidate.exists():
        return candidate
  return None


def load_config(base_name: str, cur_dir: Optional[Union[str, Path]] = None) -> Config:
  """Load the config file for `base_name`, or the default Config if there is none."""
  path = find_config_file(base_name, cur_dir)
  if path is None:
    return Config()
  return read_config(path)
