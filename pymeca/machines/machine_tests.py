import unittest

from pymeca.machines.machine import Machine, MachineBackend, need_setup_finished


class TestMachine(unittest.IsolatedAsyncioTestCase):
  class MockBackend(MachineBackend):
    def __init__(self, mock_param):
      super().__init__()
      self.mock_param = mock_param
      self.calls = []

    async def setup(self):
      self.calls.append("setup")

    async def stop(self):
      self.calls.append("stop")

    def serialize(self):
      return {**super().serialize(), "mock_param": self.mock_param}

  class MockMachine(Machine):
    @need_setup_finished
    async def ping(self):
      return "pong"

  def test_serialize(self):
    m = self.MockMachine(backend=self.MockBackend("mock_param"))
    self.assertEqual(
      m.serialize(),
      {
        "backend": {
          "mock_param": "mock_param",
          "type": "MockBackend",
        },
      },
    )

  def test_deserialize(self):
    m = self.MockMachine(backend=self.MockBackend("mock_param"))
    m2 = self.MockMachine.deserialize(m.serialize())
    self.assertIsInstance(m2.backend, self.MockBackend)
    self.assertEqual(m2.backend.mock_param, "mock_param")

  def test_deserialize_unknown_backend(self):
    with self.assertRaises(ValueError):
      MachineBackend.deserialize({"type": "NoSuchBackend"})
    with self.assertRaises(ValueError):
      MachineBackend.deserialize({"type": "MachineBackend"})

  def test_instances_are_registered(self):
    backend = self.MockBackend("registered")
    self.assertIn(backend, MachineBackend.get_all_instances())

  async def test_need_setup_finished(self):
    m = self.MockMachine(backend=self.MockBackend("mock_param"))
    with self.assertRaisesRegex(RuntimeError, r"MockMachine.ping\(\)"):
      await m.ping()
    await m.setup()
    self.assertEqual(await m.ping(), "pong")
    await m.stop()
    self.assertFalse(m.setup_finished)

  async def test_context_manager(self):
    backend = self.MockBackend("mock_param")
    async with self.MockMachine(backend=backend) as m:
      self.assertTrue(m.setup_finished)
    self.assertEqual(backend.calls, ["setup", "stop"])

  async def test_stop_without_setup(self):
    backend = self.MockBackend("mock_param")
    await self.MockMachine(backend=backend).stop()
    self.assertEqual(backend.calls, [])
