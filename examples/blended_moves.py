import asyncio
import logging
import sys

from pymeca import CommandStatus, Meca500, Meca500Backend, setup_logger

HOST = sys.argv[1] if len(sys.argv) > 1 else "192.168.0.100"


async def main():
  setup_logger(log_dir="logs", level=logging.DEBUG)

  async with Meca500(backend=Meca500Backend(host=HOST)) as robot:
    await robot.activate_robot()
    await robot.home()
    await robot.set_blending(100)
    await robot.set_joint_vel(50)

    # fire the moves without waiting for each acknowledgement so they blend
    await robot.set_queue(1)
    for theta in (170, -170, 0):
      await robot.move_joints(theta, 0, 0, 0, 0, 0)
    await robot.set_queue(0)

    if robot.in_error_mode():
      print("robot reported an error, resetting")
      result = await robot.reset_error()
      if result is CommandStatus.IN_ERROR_MODE:
        print("cannot reset from this session, reconnect first")
        return

    print("joints:", await robot.get_joints())
    print("status:", await robot.get_status_robot())


if __name__ == "__main__":
  asyncio.run(main())
