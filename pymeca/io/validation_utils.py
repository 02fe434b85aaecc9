import difflib
import logging
from typing import List, Tuple

# Below DEBUG. Every frame sent and received is logged at this level.
LOG_LEVEL_IO = 5
logging.addLevelName(LOG_LEVEL_IO, "IO")


def align_sequences(expected: str, actual: str) -> Tuple[str, str, str]:
  """Align two frames so that their differences line up.

  Returns the aligned expected and actual frames, with `-` filling gaps, and a marker line with `^`
  under every differing or missing character.
  """
  aligned_expected: List[str] = []
  aligned_actual: List[str] = []
  markers: List[str] = []

  matcher = difflib.SequenceMatcher(None, expected, actual, autojunk=False)
  for tag, i1, i2, j1, j2 in matcher.get_opcodes():
    e, a = expected[i1:i2], actual[j1:j2]
    width = max(len(e), len(a))
    aligned_expected.append(e.ljust(width, "-"))
    aligned_actual.append(a.ljust(width, "-"))
    markers.append((" " if tag == "equal" else "^") * width)

  return "".join(aligned_expected), "".join(aligned_actual), "".join(markers)
