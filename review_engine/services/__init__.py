"""
Services module for the Performance Review Scoring Engine.
"""

from review_engine.services.calibration_service import CalibrationService
from review_engine.services.final_score_service import FinalScoreService
from review_engine.services.manager_evaluation_service import ManagerEvaluationService
from review_engine.services.score_adjustment_service import ScoreAdjustmentService

__all__ = [
    "CalibrationService",
    "FinalScoreService",
    "ManagerEvaluationService",
    "ScoreAdjustmentService",
]
