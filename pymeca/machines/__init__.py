from pymeca.machines.backend import MachineBackend
from pymeca.machines.machine import Machine, need_setup_finished
