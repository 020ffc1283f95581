"""Score calculation for solved puzzles.

Four pillars, all coefficients taken from a ScoringConfig:
1. Speed bonus - solve faster for more points
2. Accuracy - fewer wrong attempts, fewer penalties (hints cost points too)
3. Streak bonus - consecutive days played
4. Difficulty bonus - levels above the baseline
"""

import math

from .config import DEFAULT_SCORING_CONFIG, DEFAULT_DIFFICULTY, POINTS_PER_LEVEL, ScoringConfig
from .models import ScoreBreakdown


class ScoreInput:
    """Inputs for scoring one solved puzzle."""

    def __init__(self, time_taken_seconds: float, wrong_attempts: int = 0, streak_days: int = 0,
                 difficulty_level: int = DEFAULT_DIFFICULTY, hints_used: int = 0):
        self.time_taken_seconds = time_taken_seconds
        self.wrong_attempts = wrong_attempts
        self.streak_days = streak_days
        self.difficulty_level = difficulty_level
        self.hints_used = hints_used


def calculate_speed_bonus(time_taken_seconds: float, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> int:
    speed = config.speed_bonus
    if time_taken_seconds <= speed.fast_threshold:
        return speed.max_bonus
    if time_taken_seconds >= speed.slow_threshold:
        return 0
    # Linear between the two thresholds
    ratio = 1 - (time_taken_seconds - speed.fast_threshold) / (speed.slow_threshold - speed.fast_threshold)
    return _round_half_up(speed.max_bonus * ratio)


def calculate_accuracy_penalty(wrong_attempts: int, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> int:
    return wrong_attempts * config.accuracy.penalty_per_attempt


def calculate_hint_penalty(hints_used: int, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> int:
    return min(hints_used * config.hints.penalty_per_hint, config.hints.max_penalty)


def calculate_streak_bonus(streak_days: int, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> int:
    return min(streak_days * config.streak.bonus_per_day, config.streak.max_bonus)


def calculate_difficulty_bonus(difficulty_level: int, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> int:
    difficulty = config.difficulty
    if difficulty_level <= difficulty.baseline:
        return 0
    return min((difficulty_level - difficulty.baseline) * difficulty.bonus_per_level, difficulty.max_bonus)


def calculate_score(score_input: ScoreInput, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> ScoreBreakdown:
    """Full score breakdown for a solved puzzle, floored at the minimum score."""
    base_score = config.base_score
    speed_bonus = calculate_speed_bonus(score_input.time_taken_seconds, config)
    accuracy_penalty = calculate_accuracy_penalty(score_input.wrong_attempts, config)
    hint_penalty = calculate_hint_penalty(score_input.hints_used, config)
    streak_bonus = calculate_streak_bonus(score_input.streak_days, config)
    difficulty_bonus = calculate_difficulty_bonus(score_input.difficulty_level, config)

    raw_total = base_score + speed_bonus - accuracy_penalty - hint_penalty + streak_bonus + difficulty_bonus
    return ScoreBreakdown(
        base_score=base_score,
        speed_bonus=speed_bonus,
        accuracy_penalty=accuracy_penalty,
        hint_penalty=hint_penalty,
        streak_bonus=streak_bonus,
        difficulty_bonus=difficulty_bonus,
        total_score=max(config.min_score, raw_total)
    )


def calculate_game_points(attempts: int, time_taken: float | None = None, streak_days: int = 0,
                          difficulty: int = DEFAULT_DIFFICULTY, hints_used: int = 0,
                          config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> int:
    """Points for a finished game given the attempt number it was solved on.

    Unlike calculate_score, an unknown solve time earns no speed bonus and a
    partial speed bonus is floored.
    """
    speed = config.speed_bonus
    score = config.base_score

    if time_taken is not None and time_taken < speed.slow_threshold:
        if time_taken <= speed.fast_threshold:
            score += speed.max_bonus
        else:
            ratio = 1 - (time_taken - speed.fast_threshold) / (speed.slow_threshold - speed.fast_threshold)
            score += math.floor(speed.max_bonus * ratio)

    # First attempt carries no penalty
    score -= calculate_accuracy_penalty(max(0, attempts - 1), config)
    score -= calculate_hint_penalty(max(0, hints_used), config)
    score += calculate_streak_bonus(max(0, streak_days), config)
    score += calculate_difficulty_bonus(difficulty, config)
    return max(config.min_score, score)


def calculate_level(total_points: int, points_per_level: int = POINTS_PER_LEVEL) -> int:
    """Level 1 covers 0..points_per_level-1 points, level N starts at (N-1)*points_per_level."""
    return max(1, total_points // points_per_level + 1)


def points_to_next_level(total_points: int, points_per_level: int = POINTS_PER_LEVEL) -> dict:
    current_level = calculate_level(total_points, points_per_level)
    points_in_level = total_points - (current_level - 1) * points_per_level
    return {
        'current_level': current_level,
        'points_in_current_level': points_in_level,
        'points_needed': points_per_level - points_in_level
    }


def _round_half_up(value: float) -> int:
    # round() would send 12.5 to 12
    return math.floor(value + 0.5)
