import pytest

from pymeca import Config, configure
from pymeca.io.validation_utils import LOG_LEVEL_IO


@pytest.fixture(autouse=True, scope="session")
def log_frames_during_tests(tmp_path_factory):
  # every frame sent and received ends up in the session's temporary log directory
  log_dir = tmp_path_factory.mktemp("logs")
  configure(Config(logging=Config.Logging(level=LOG_LEVEL_IO, log_dir=log_dir)))
  yield
  configure(Config())
