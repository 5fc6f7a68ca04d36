"""
scoring/ - Performance Review Scoring

Modules:
    score_calculator.py         - Level-weighted pillar score calculator
    final_score_calculator.py   - Final score assembly from manager evaluations
    peer_feedback_aggregator.py - Per-pillar average of peer feedback
"""
