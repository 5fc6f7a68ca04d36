from enum import Enum

class Pillar(str, Enum):
    PROJECT_IMPACT = "project_impact"
    DIRECTION = "direction"
    ENGINEERING_EXCELLENCE = "engineering_excellence"
    OPERATIONAL_OWNERSHIP = "operational_ownership"
    PEOPLE_IMPACT = "people_impact"

class EngineerLevel(str, Enum):
    JUNIOR = "JUNIOR"
    MID = "MID"
    SENIOR = "SENIOR"
    LEAD = "LEAD"
    MANAGER = "MANAGER"

class BonusTier(str, Enum):
    BELOW = "BELOW"      # < 50%
    MEETS = "MEETS"      # 50-84%
    EXCEEDS = "EXCEEDS"  # >= 85%

class EvaluationStatus(str, Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"

class CalibrationStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"

class AdjustmentStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

class ReviewAction(str, Enum):
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

class CycleStatus(str, Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    CALIBRATION = "CALIBRATION"
    COMPLETED = "COMPLETED"

class CyclePhase(str, Enum):
    SELF_REVIEW = "self_review"
    PEER_FEEDBACK = "peer_feedback"
    MANAGER_EVALUATION = "manager_evaluation"
    CALIBRATION = "calibration"
    FEEDBACK_DELIVERY = "feedback_delivery"

class CalibrationProgress(str, Enum):
    CALIBRATED = "CALIBRATED"  # at least one calibration adjustment
    PENDING = "PENDING"
