"""Configuration constants for rebuzzle application."""

import json
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

# Answer validation
QUICK_ACCEPT_THRESHOLD = 0.98   # Near-exact match, accepted without the judge
TYPO_ACCEPT_THRESHOLD = 0.95    # Minor typo, still accepted without the judge
WORD_ORDER_CONFIDENCE = 0.95
AI_MINIMUM_SIMILARITY = 0.3     # Below this the judge is only asked when always_use_ai is set
AI_TIMEOUT_MS = 5000
MAX_TYPO_RATIO = 0.15           # Informational, not enforced
SUGGESTION_SIMILARITY = 0.5     # Rejections above this get spelling suggestions

# Scoring
BASE_SCORE = 100
MIN_SCORE = 10
SPEED_MAX_BONUS = 50
SPEED_FAST_THRESHOLD = 30       # seconds - full bonus at or under this
SPEED_SLOW_THRESHOLD = 120      # seconds - no bonus at or over this
PENALTY_PER_ATTEMPT = 15
PENALTY_PER_HINT = 10
MAX_HINT_PENALTY = 30
STREAK_BONUS_PER_DAY = 5
STREAK_MAX_BONUS = 50
DIFFICULTY_BONUS_PER_LEVEL = 10
DIFFICULTY_BASELINE = 4
DIFFICULTY_MAX_BONUS = 60
DEFAULT_DIFFICULTY = 5
POINTS_PER_LEVEL = 1000
MAX_ATTEMPTS = 3

# Remote judge
JUDGE_MODEL = 'gemini-2.0-flash'
JUDGE_TEMPERATURE = 0.3
JUDGE_MAX_ATTEMPTS = 3
JUDGE_RETRY_INITIAL_DELAY = 1.0   # seconds
JUDGE_RETRY_MAX_DELAY = 10.0
JUDGE_RETRY_BACKOFF = 2

CONFIG_PATH = Path.home() / '.config' / 'rebuzzle' / 'config.json'


@dataclass(frozen=True)
class ValidationConfig:
    enabled: bool = True
    always_use_ai: bool = True
    quick_accept_threshold: float = QUICK_ACCEPT_THRESHOLD
    ai_minimum_similarity: float = AI_MINIMUM_SIMILARITY
    ai_timeout_ms: int = AI_TIMEOUT_MS
    tolerate_word_order_variations: bool = True
    expand_contractions: bool = True
    ignore_punctuation: bool = True
    ignore_capitalization: bool = True
    max_typo_ratio: float = MAX_TYPO_RATIO


@dataclass(frozen=True)
class SpeedBonusConfig:
    max_bonus: int = SPEED_MAX_BONUS
    fast_threshold: float = SPEED_FAST_THRESHOLD
    slow_threshold: float = SPEED_SLOW_THRESHOLD


@dataclass(frozen=True)
class AccuracyConfig:
    penalty_per_attempt: int = PENALTY_PER_ATTEMPT


@dataclass(frozen=True)
class HintConfig:
    penalty_per_hint: int = PENALTY_PER_HINT
    max_penalty: int = MAX_HINT_PENALTY


@dataclass(frozen=True)
class StreakConfig:
    bonus_per_day: int = STREAK_BONUS_PER_DAY
    max_bonus: int = STREAK_MAX_BONUS


@dataclass(frozen=True)
class DifficultyConfig:
    bonus_per_level: int = DIFFICULTY_BONUS_PER_LEVEL
    baseline: int = DIFFICULTY_BASELINE
    max_bonus: int = DIFFICULTY_MAX_BONUS


@dataclass(frozen=True)
class ScoringConfig:
    base_score: int = BASE_SCORE
    min_score: int = MIN_SCORE
    speed_bonus: SpeedBonusConfig = field(default_factory=SpeedBonusConfig)
    accuracy: AccuracyConfig = field(default_factory=AccuracyConfig)
    hints: HintConfig = field(default_factory=HintConfig)
    streak: StreakConfig = field(default_factory=StreakConfig)
    difficulty: DifficultyConfig = field(default_factory=DifficultyConfig)


DEFAULT_VALIDATION_CONFIG = ValidationConfig()
DEFAULT_SCORING_CONFIG = ScoringConfig()

_SCORING_SECTIONS = {
    'speed_bonus': SpeedBonusConfig,
    'accuracy': AccuracyConfig,
    'hints': HintConfig,
    'streak': StreakConfig,
    'difficulty': DifficultyConfig,
}

_UNIT_INTERVAL_FIELDS = ('quick_accept_threshold', 'ai_minimum_similarity')


@dataclass(frozen=True)
class Settings:
    """Everything the server needs at startup."""

    validation: ValidationConfig = DEFAULT_VALIDATION_CONFIG
    scoring: ScoringConfig = DEFAULT_SCORING_CONFIG
    gemini_api_key: str | None = None
    judge_model: str = JUDGE_MODEL


def _check_keys(section: str, data: dict, cls) -> None:
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown keys in '{section}': {', '.join(sorted(unknown))}")


def build_validation_config(data: dict) -> ValidationConfig:
    """Build a ValidationConfig from a dict of overrides."""
    _check_keys('answer_validation', data, ValidationConfig)
    config = replace(DEFAULT_VALIDATION_CONFIG, **data)
    for name in _UNIT_INTERVAL_FIELDS:
        value = getattr(config, name)
        if not 0 <= value <= 1:
            raise ValueError(f"'{name}' must be between 0 and 1, got {value}")
    if config.ai_timeout_ms <= 0:
        raise ValueError(f"'ai_timeout_ms' must be positive, got {config.ai_timeout_ms}")
    if not 0 <= config.max_typo_ratio <= 0.3:
        raise ValueError(f"'max_typo_ratio' must be between 0 and 0.3, got {config.max_typo_ratio}")
    return config


def build_scoring_config(data: dict) -> ScoringConfig:
    """Build a ScoringConfig from a dict of overrides (nested sections allowed)."""
    _check_keys('scoring', data, ScoringConfig)
    overrides = {}
    for key, value in data.items():
        section_cls = _SCORING_SECTIONS.get(key)
        if section_cls:
            _check_keys(f'scoring.{key}', value, section_cls)
            overrides[key] = replace(getattr(DEFAULT_SCORING_CONFIG, key), **value)
        else:
            overrides[key] = value
    config = replace(DEFAULT_SCORING_CONFIG, **overrides)
    if config.speed_bonus.slow_threshold <= config.speed_bonus.fast_threshold:
        raise ValueError("'speed_bonus.slow_threshold' must be greater than 'fast_threshold'")
    return config


def load_settings(path: str | os.PathLike | None = None) -> Settings:
    """Load settings from a JSON config file and the environment.

    The file is optional. GEMINI_API_KEY in the environment takes precedence
    over the key stored in the file.
    """
    path = Path(path or os.environ.get('REBUZZLE_CONFIG', CONFIG_PATH))
    data = {}
    if path.exists():
        with open(path, 'r') as f:
            data = json.load(f)

    validation = build_validation_config(data.get('answer_validation', {}))
    scoring = build_scoring_config(data.get('scoring', {}))
    api_key = os.environ.get('GEMINI_API_KEY') or data.get('gemini_api_key')
    return Settings(
        validation=validation,
        scoring=scoring,
        gemini_api_key=api_key,
        judge_model=data.get('judge_model', JUDGE_MODEL),
    )
