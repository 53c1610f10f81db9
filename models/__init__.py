from models.assignment import Assignment, Role, UNASSIGNED_LABEL
from models.teacher import TeacherConstraint, TeacherPools
from models.slot_config import SlotConfig, SlotConfigError, FeasibilityReport

__all__ = [
    "Assignment",
    "Role",
    "UNASSIGNED_LABEL",
    "TeacherConstraint",
    "TeacherPools",
    "SlotConfig",
    "SlotConfigError",
    "FeasibilityReport",
]
