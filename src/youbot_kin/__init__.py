from .core.config import RobotConfig, load_config
from .core.orientation import matrix_to_pose, pose_to_matrix, rot_to_euler_xy_dash_z
from .kinematics import KinematicsSolver
from .model.dh_params import youbot_5R_num, youbot_joint_limits
from .solvers.ik_solver import GeometricSolution, IKOptions, NoSolution, NumericSolution
from .solvers.metrics import orientation_error, position_error

__all__ = [
    "GeometricSolution",
    "IKOptions",
    "KinematicsSolver",
    "NoSolution",
    "NumericSolution",
    "RobotConfig",
    "load_config",
    "matrix_to_pose",
    "orientation_error",
    "pose_to_matrix",
    "position_error",
    "rot_to_euler_xy_dash_z",
    "youbot_5R_num",
    "youbot_joint_limits",
]
