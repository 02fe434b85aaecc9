from typing import Dict, Optional, Sequence, Tuple, Union

from pymeca.arms.meca500.backend import CommandResult, CommandStatus, Meca500Backend
from pymeca.arms.meca500.protocol import Argument
from pymeca.machines.machine import Machine, need_setup_finished

ROBOT_STATUS_KEYS: Tuple[str, ...] = (
  "activated",
  "homing",
  "simulation",
  "error",
  "paused",
  "eob",
  "eom",
)

GRIPPER_STATUS_KEYS: Tuple[str, ...] = (
  "gripper_enabled",
  "homing_state",
  "holding_part",
  "limit_reached",
  "error_state",
  "force_overload",
)


class Meca500(Machine):
  """A Mecademic Meca500 six axis robot arm.

  Example:

    >>> async with Meca500(backend=Meca500Backend(host="192.168.0.100")) as robot:
    ...   await robot.activate_robot()
    ...   await robot.home()
    ...   await robot.set_blending(0)
    ...   await robot.set_joint_vel(100)
    ...   await robot.move_joints(0, -70, 70, 0, 0, 0)
    ...   await robot.gripper_close()

  Every command returns the decoded reply of the robot, or a :class:`CommandStatus` when no reply
  was read (see :meth:`Meca500Backend.run`).
  """

  def __init__(self, backend: Meca500Backend):
    super().__init__(backend=backend)
    self.backend: Meca500Backend = backend

  @need_setup_finished
  async def run(self, command: str, args: Optional[Sequence[Argument]] = None) -> CommandResult:
    return await self.backend.run(command, args)

  # region session

  @need_setup_finished
  async def set_eob(self, e: int) -> CommandResult:
    """Enable (1) or disable (0) End of Block answers."""
    return await self.backend.set_eob(e)

  @need_setup_finished
  async def set_eom(self, e: int) -> CommandResult:
    """Enable (1) or disable (0) End of Movement answers."""
    return await self.backend.set_eom(e)

  @need_setup_finished
  async def set_queue(self, e: int) -> bool:
    """Enable (1) or disable (0) queueing of move commands, for blending."""
    return await self.backend.set_queue(e)

  @need_setup_finished
  async def reset_error(self) -> CommandResult:
    return await self.backend.reset_error()

  def in_error_mode(self) -> bool:
    """Whether the robot reported an error and commands are being refused."""
    return self.backend.is_in_error_mode()

  # endregion

  # region activation and status

  async def activate_robot(self) -> CommandResult:
    return await self.run("ActivateRobot")

  async def deactivate_robot(self) -> CommandResult:
    return await self.run("DeactivateRobot")

  async def activate_sim(self) -> CommandResult:
    """Activate simulation mode: the robot executes commands without moving."""
    return await self.run("ActivateSim")

  async def deactivate_sim(self) -> CommandResult:
    return await self.run("DeactivateSim")

  async def switch_to_ethercat(self) -> CommandResult:
    """Place the robot in EtherCAT mode. The TCP connection is closed by the robot."""
    return await self.run("SwitchToEtherCAT")

  async def home(self) -> CommandResult:
    return await self.run("Home")

  async def brakes_on(self) -> CommandResult:
    return await self.run("BrakesOn")

  async def brakes_off(self) -> CommandResult:
    return await self.run("BrakesOff")

  async def get_conf(self) -> CommandResult:
    return await self.run("GetConf")

  async def get_joints(self) -> CommandResult:
    return await self.run("GetJoints")

  async def get_pose(self) -> CommandResult:
    return await self.run("GetPose")

  async def get_status_robot(self) -> Union[Dict[str, int], CommandStatus, str]:
    """Get the robot status as a dict keyed by `ROBOT_STATUS_KEYS`."""
    return _zip_status(ROBOT_STATUS_KEYS, await self.run("GetStatusRobot"))

  async def get_status_gripper(self) -> Union[Dict[str, int], CommandStatus, str]:
    """Get the gripper status as a dict keyed by `GRIPPER_STATUS_KEYS`."""
    return _zip_status(GRIPPER_STATUS_KEYS, await self.run("GetStatusGripper"))

  # endregion

  # region motion control

  async def pause_motion(self) -> CommandResult:
    return await self.run("PauseMotion")

  async def resume_motion(self) -> CommandResult:
    return await self.run("ResumeMotion")

  async def clear_motion(self) -> CommandResult:
    return await self.run("ClearMotion")

  async def delay(self, t: float) -> CommandResult:
    """Make the robot wait `t` seconds before executing the next command."""
    return await self.run("Delay", [t])

  # endregion

  # region movement

  async def move_joints(
    self,
    theta_1: float,
    theta_2: float,
    theta_3: float,
    theta_4: float,
    theta_5: float,
    theta_6: float,
  ) -> CommandResult:
    """Move the joints to the given angles, in degrees. `theta_n` is the angle of joint n."""
    return await self.run("MoveJoints", [theta_1, theta_2, theta_3, theta_4, theta_5, theta_6])

  async def move_lin(
    self, x: float, y: float, z: float, alpha: float, beta: float, gamma: float
  ) -> CommandResult:
    """Move the tool in a straight line to the pose (x, y, z, alpha, beta, gamma)."""
    return await self.run("MoveLin", [x, y, z, alpha, beta, gamma])

  async def move_lin_rel_trf(
    self, x: float, y: float, z: float, alpha: float, beta: float, gamma: float
  ) -> CommandResult:
    """Linear move relative to the tool reference frame."""
    return await self.run("MoveLinRelTRF", [x, y, z, alpha, beta, gamma])

  async def move_lin_rel_wrf(
    self, x: float, y: float, z: float, alpha: float, beta: float, gamma: float
  ) -> CommandResult:
    """Linear move relative to the world reference frame."""
    return await self.run("MoveLinRelWRF", [x, y, z, alpha, beta, gamma])

  async def move_pose(
    self, x: float, y: float, z: float, alpha: float, beta: float, gamma: float
  ) -> CommandResult:
    return await self.run("MovePose", [x, y, z, alpha, beta, gamma])

  # endregion

  # region motion parameters

  async def set_blending(self, p: float) -> CommandResult:
    """Set the blending percentage between consecutive moves, 0 disables blending."""
    return await self.run("SetBlending", [p])

  async def set_auto_conf(self, e: int) -> CommandResult:
    return await self.run("SetAutoConf", [e])

  async def set_cart_acc(self, p: float) -> CommandResult:
    return await self.run("SetCartAcc", [p])

  async def set_cart_ang_vel(self, w: float) -> CommandResult:
    return await self.run("SetCartAngVel", [w])

  async def set_cart_lin_vel(self, v: float) -> CommandResult:
    return await self.run("SetCartLinVel", [v])

  async def set_conf(self, c1: int, c3: int, c5: int) -> CommandResult:
    """Set the inverse kinematic configuration observed by `MovePose`. Each of `c1`, `c3` and
    `c5` is 1 or -1."""
    return await self.run("SetConf", [c1, c3, c5])

  async def set_joint_acc(self, p: float) -> CommandResult:
    """Set the acceleration of the joints, between 1 and 100 percent."""
    return await self.run("SetJointAcc", [p])

  async def set_joint_vel(self, velocity: float) -> CommandResult:
    """Set the angular velocity of the joints, between 1 and 100 percent."""
    return await self.run("SetJointVel", [velocity])

  async def set_trf(
    self, x: float, y: float, z: float, alpha: float, beta: float, gamma: float
  ) -> CommandResult:
    """Set the tool reference frame with respect to the flange reference frame."""
    return await self.run("SetTRF", [x, y, z, alpha, beta, gamma])

  async def set_wrf(
    self, x: float, y: float, z: float, alpha: float, beta: float, gamma: float
  ) -> CommandResult:
    """Set the world reference frame with respect to the base reference frame."""
    return await self.run("SetWRF", [x, y, z, alpha, beta, gamma])

  # endregion

  # region gripper

  async def gripper_open(self) -> CommandResult:
    return await self.run("GripperOpen")

  async def gripper_close(self) -> CommandResult:
    return await self.run("GripperClose")

  async def set_gripper_force(self, p: float) -> CommandResult:
    """Set the grip force, between 1 and 100 percent."""
    return await self.run("SetGripperForce", [p])

  async def set_gripper_vel(self, p: float) -> CommandResult:
    """Set the velocity of the gripper fingers, between 1 and 100 percent."""
    return await self.run("SetGripperVel", [p])

  # endregion


def _zip_status(keys: Tuple[str, ...], response: CommandResult):
  if not isinstance(response, list):
    return response
  return dict(zip(keys, response))
