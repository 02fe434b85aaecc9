import unittest

from pymeca.arms.meca500.errors import DecodeError, MalformedFrameError
from pymeca.arms.meca500.protocol import (
  EOB_ACK,
  EOM_ACK,
  EOM_COMMANDS,
  STATIC_ANSWER_CODES,
  answer_codes,
  build_command,
  decode_response_body,
  encode,
  encode_reply,
  is_error_code,
  parse_response,
)


class BuildCommandTests(unittest.TestCase):
  def test_no_args(self):
    self.assertEqual(build_command("ActivateRobot", []), "ActivateRobot")
    self.assertEqual(build_command("ActivateRobot"), "ActivateRobot")
    self.assertEqual(build_command("ActivateRobot", None), "ActivateRobot")

  def test_args(self):
    self.assertEqual(
      build_command("MoveLin", [170, -50, 150, 0, 90, 0]), "MoveLin(170,-50,150,0,90,0)"
    )

  def test_float_args_keep_fraction(self):
    self.assertEqual(build_command("MoveJoints", [0.5, -90.0, 1]), "MoveJoints(0.5,-90.0,1)")

  def test_bool_args_are_numbers(self):
    self.assertEqual(build_command("SetEOM", [False]), "SetEOM(0)")
    self.assertEqual(build_command("SetEOB", [True]), "SetEOB(1)")

  def test_no_range_validation(self):
    self.assertEqual(build_command("SetJointVel", [1000]), "SetJointVel(1000)")

  def test_encode(self):
    self.assertEqual(encode("Home"), b"Home\0")
    self.assertEqual(encode(build_command("Delay", [2])), b"Delay(2)\0")


class ParseResponseTests(unittest.TestCase):
  def test_parse(self):
    self.assertEqual(parse_response("[1234][This is a test.]\0"), (1234, "This is a test."))
    self.assertEqual(parse_response("[1234][1,2,3,4]\0"), (1234, "1,2,3,4"))

  def test_parse_without_terminator(self):
    self.assertEqual(parse_response("[1234][This is a test.]"), (1234, "This is a test."))

  def test_parse_bytes(self):
    self.assertEqual(parse_response(b"[2026][1.0,2.0]\0"), (2026, "1.0,2.0"))

  def test_empty_body(self):
    self.assertEqual(parse_response(b"[3012][]\0"), (3012, ""))

  def test_leading_zeros(self):
    self.assertEqual(parse_response("[0042][x]"), (42, "x"))

  def test_reply_round_trip(self):
    for code, body in [(3000, "Connected to Meca500 x_x_x.x.x."), (2007, "1,1,0,0,0,1,1"), (1, "")]:
      self.assertEqual(parse_response(encode_reply(code, body)), (code, body))

  def test_malformed(self):
    for frame in [
      "",
      "\0",
      "[123][body]",
      "[12345][body]",
      "[12a4][body]",
      "1234][body]",
      "[1234]body",
      "[1234][body",
      "[1234] [body]",
      "[ 123][body]",
      "[+123][body]",
      b"[1234][\xff]\0",
    ]:
      with self.subTest(frame=frame):
        with self.assertRaises(MalformedFrameError):
          parse_response(frame)

  def test_only_one_terminator_is_stripped(self):
    with self.assertRaises(MalformedFrameError):
      parse_response("[1234][body]\0\0")


class DecodeResponseBodyTests(unittest.TestCase):
  def test_float_body(self):
    self.assertEqual(decode_response_body(2026, "1.0,2.0,3.0"), [1.0, 2.0, 3.0])
    self.assertEqual(
      decode_response_body(2027, "170.5,-50,150,0,90,0"), [170.5, -50.0, 150.0, 0.0, 90.0, 0.0]
    )

  def test_integer_body(self):
    self.assertEqual(decode_response_body(2029, "1,2,3"), [1, 2, 3])
    self.assertEqual(decode_response_body(2007, "1,1,0,0,0,1,1"), [1, 1, 0, 0, 0, 1, 1])
    self.assertEqual(decode_response_body(2079, "1,0,0,0,0,0"), [1, 0, 0, 0, 0, 0])

  def test_string_body(self):
    self.assertEqual(decode_response_body(2008, "This is a test."), "This is a test.")
    body = "The robot is not activated."
    self.assertEqual(decode_response_body(1005, body), body)

  def test_non_numeric_segment(self):
    with self.assertRaises(DecodeError) as ctx:
      decode_response_body(2026, "1.0,abc,3.0")
    self.assertEqual(ctx.exception.code, 2026)
    self.assertEqual(ctx.exception.body, "1.0,abc,3.0")

    for code, body in (
      (2026, "nan,inf,-inf"),
      (2026, "1_000,2.0"),
      (2026, "\u0661.5,2"),
      (2026, "1e3,2.0"),
      (2027, "1.,2.0"),
      (2029, "1_0,2"),
      (2029, " 1 ,2"),
      (2007, "+1,0"),
    ):
      with self.subTest(code=code, body=body):
        with self.assertRaises(DecodeError):
          decode_response_body(code, body)

  def test_float_in_integer_body(self):
    with self.assertRaises(DecodeError):
      decode_response_body(2029, "1,2.5,3")

  def test_empty_numeric_body(self):
    with self.assertRaises(DecodeError):
      decode_response_body(2027, "")


class AnswerCodesTests(unittest.TestCase):
  def test_static_commands_ignore_flags(self):
    self.assertEqual(answer_codes("BrakesOn"), [2010])
    self.assertEqual(answer_codes("BrakesOn", eob=True, eom=True), [2010])
    for command, codes in STATIC_ANSWER_CODES.items():
      for eob in (False, True):
        for eom in (False, True):
          with self.subTest(command=command, eob=eob, eom=eom):
            self.assertEqual(answer_codes(command, eob=eob, eom=eom), list(codes))

  def test_pause_motion(self):
    self.assertEqual(answer_codes("PauseMotion"), [2042])
    self.assertEqual(answer_codes("PauseMotion", eob=True), [2042])
    self.assertEqual(answer_codes("PauseMotion", eom=True), [2042, 3004])

  def test_eom_command(self):
    self.assertEqual(answer_codes("SetWRF", eob=True, eom=True), [3004, 3012])
    self.assertEqual(answer_codes("SetWRF", eob=True, eom=False), [3012])
    self.assertEqual(answer_codes("SetWRF", eob=False, eom=True), [3004])
    self.assertEqual(answer_codes("SetWRF", eob=False, eom=False), [])
    self.assertEqual(answer_codes("SetWRF"), [])

  def test_non_eom_command(self):
    self.assertEqual(answer_codes("SetAutoConf", eob=False, eom=True), [])
    self.assertEqual(answer_codes("SetAutoConf", eob=True, eom=True), [3012])

  def test_eob_and_eom_membership(self):
    for command in ["MoveJoints", "MovePose", "SetCartAcc", "SetBlending", "GripperOpen", "Foo"]:
      with self.subTest(command=command):
        self.assertIn(EOB_ACK, answer_codes(command, eob=True))
        self.assertNotIn(EOB_ACK, answer_codes(command, eob=False))
        self.assertEqual(EOM_ACK in answer_codes(command, eom=True), command in EOM_COMMANDS)

  def test_unknown_command(self):
    self.assertEqual(answer_codes("NotACommand"), [])


class ErrorCodeTests(unittest.TestCase):
  def test_command_errors(self):
    self.assertTrue(is_error_code(1000))
    self.assertTrue(is_error_code(1011))
    self.assertTrue(is_error_code(1999))

  def test_general_errors(self):
    for code in (3001, 3003, 3005, 3009, 3014, 3026):
      self.assertTrue(is_error_code(code))

  def test_not_errors(self):
    for code in (999, 2000, 2026, 3000, 3004, 3012):
      self.assertFalse(is_error_code(code))
