from pymeca.arms.meca500 import CommandStatus, Meca500, Meca500Backend
