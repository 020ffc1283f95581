from .models import (
    GuessAttempt, JudgeVerdict, ValidationVerdict, ScoreBreakdown,
    AttemptRecord, GameContext, UserStats
)
from .interfaces import SemanticJudge, JudgeError
from .utils import (
    normalize_for_comparison, normalize_answer, levenshtein_distance,
    similarity, match_with_word_order_tolerance
)
from .validation import validate_answer, quick_validate_answer, generate_feedback, batch_validate
from .scoring import (
    ScoreInput, calculate_score, calculate_game_points, calculate_level, points_to_next_level
)
from .achievements import AchievementDefinition, ACHIEVEMENTS, evaluate_achievements
from .config import (
    ValidationConfig, ScoringConfig, Settings,
    DEFAULT_VALIDATION_CONFIG, DEFAULT_SCORING_CONFIG, load_settings
)

__all__ = [
    'GuessAttempt', 'JudgeVerdict', 'ValidationVerdict', 'ScoreBreakdown',
    'AttemptRecord', 'GameContext', 'UserStats',
    'SemanticJudge', 'JudgeError',
    'normalize_for_comparison', 'normalize_answer', 'levenshtein_distance',
    'similarity', 'match_with_word_order_tolerance',
    'validate_answer', 'quick_validate_answer', 'generate_feedback', 'batch_validate',
    'ScoreInput', 'calculate_score', 'calculate_game_points', 'calculate_level', 'points_to_next_level',
    'AchievementDefinition', 'ACHIEVEMENTS', 'evaluate_achievements',
    'ValidationConfig', 'ScoringConfig', 'Settings',
    'DEFAULT_VALIDATION_CONFIG', 'DEFAULT_SCORING_CONFIG', 'load_settings'
]
