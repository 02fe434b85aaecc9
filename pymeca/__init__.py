import datetime
import logging
from pathlib import Path
from typing import Optional, Union

from pymeca.__version__ import __version__
from pymeca.config import Config, load_config
from pymeca.io import end_validation, start_capture, stop_capture, validate
from pymeca.arms import CommandStatus, Meca500, Meca500Backend

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

CONFIG = load_config("pymeca")


def setup_logger(log_dir: Optional[Union[Path, str]], level: int):
  """Set the level of the `pymeca` logger and send its records to a daily log file.

  Handlers of an earlier call are removed, so calling this again reconfigures logging.

  Args:
    log_dir: directory for the `pymeca-YYYYMMDD.log` files, created if missing. `None` adds no
      file handler.
    level: the logging level. `pymeca.io.validation_utils.LOG_LEVEL_IO` also logs raw frames.
  """
  logger = logging.getLogger("pymeca")
  logger.setLevel(level)

  for handler in list(logger.handlers):
    logger.removeHandler(handler)
    handler.close()

  if log_dir is None:
    return

  log_dir = Path(log_dir)
  log_dir.mkdir(parents=True, exist_ok=True)
  day = datetime.date.today().strftime("%Y%m%d")
  file_handler = logging.FileHandler(log_dir / f"pymeca-{day}.log")
  file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
  logger.addHandler(file_handler)


def configure(cfg: Config):
  """Apply a Config to the running pymeca."""
  setup_logger(cfg.logging.log_dir, cfg.logging.level)


configure(CONFIG)
