"""Domain models for rebuzzle application."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

from .config import MAX_ATTEMPTS

VALIDATION_METHODS = ('exact', 'normalized', 'fuzzy', 'ai')
DIFFICULTIES = ('easy', 'medium', 'hard')


def _parse_date(value) -> date | None:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(value)


def as_utc_naive(value: datetime | None) -> datetime | None:
    """All datetimes are naive UTC; aware values are converted."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _parse_datetime(value) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return as_utc_naive(value)
    # fromisoformat only accepts a trailing Z from 3.11 on
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    return as_utc_naive(datetime.fromisoformat(value))


@dataclass(frozen=True)
class GuessAttempt:
    """A player's guess against the day's answer."""

    text: str
    correct_answer: str
    puzzle_context: str | None = None
    explanation: str | None = None


class JudgeVerdict:
    """Structured answer returned by a remote semantic judge."""

    def __init__(self, is_correct: bool, confidence: float, reasoning: str,
                 suggestions: list[str] | None = None):
        self.is_correct = is_correct
        self.confidence = confidence
        self.reasoning = reasoning
        self.suggestions = suggestions

    def to_dict(self) -> dict:
        return {
            'is_correct': self.is_correct,
            'confidence': self.confidence,
            'reasoning': self.reasoning,
            'suggestions': self.suggestions
        }


class ValidationVerdict:
    """Outcome of validating one guess. `method` names the deciding stage."""

    def __init__(self, is_correct: bool, confidence: float, method: str,
                 reasoning: str | None = None, suggestions: list[str] | None = None):
        if method not in VALIDATION_METHODS:
            raise ValueError(f"Unknown validation method: {method}")
        self.is_correct = is_correct
        self.confidence = confidence
        self.method = method
        self.reasoning = reasoning
        self.suggestions = suggestions

    def to_dict(self) -> dict:
        return {
            'is_correct': self.is_correct,
            'confidence': self.confidence,
            'method': self.method,
            'reasoning': self.reasoning,
            'suggestions': self.suggestions
        }

    def __repr__(self) -> str:
        return (f"ValidationVerdict(is_correct={self.is_correct}, confidence={self.confidence:.3f}, "
                f"method={self.method!r})")


class ScoreBreakdown:
    """Per-component score of a solved puzzle."""

    def __init__(self, base_score: int, speed_bonus: int, accuracy_penalty: int, hint_penalty: int,
                 streak_bonus: int, difficulty_bonus: int, total_score: int):
        self.base_score = base_score
        self.speed_bonus = speed_bonus
        self.accuracy_penalty = accuracy_penalty
        self.hint_penalty = hint_penalty
        self.streak_bonus = streak_bonus
        self.difficulty_bonus = difficulty_bonus
        self.total_score = total_score

    def to_dict(self) -> dict:
        return {
            'base_score': self.base_score,
            'speed_bonus': self.speed_bonus,
            'accuracy_penalty': self.accuracy_penalty,
            'hint_penalty': self.hint_penalty,
            'streak_bonus': self.streak_bonus,
            'difficulty_bonus': self.difficulty_bonus,
            'total_score': self.total_score
        }


class AttemptRecord:
    """A past attempt, as supplied by the caller's attempt history."""

    def __init__(self, is_correct: bool, attempted_at: datetime, hints_used: int = 0,
                 time_spent_seconds: float | None = None, difficulty: str | None = None):
        self.is_correct = is_correct
        self.attempted_at = as_utc_naive(attempted_at)
        self.hints_used = hints_used
        self.time_spent_seconds = time_spent_seconds
        self.difficulty = difficulty

    def to_dict(self) -> dict:
        return {
            'is_correct': self.is_correct,
            'attempted_at': self.attempted_at.isoformat(),
            'hints_used': self.hints_used,
            'time_spent_seconds': self.time_spent_seconds,
            'difficulty': self.difficulty
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'AttemptRecord':
        return cls(
            is_correct=data['is_correct'],
            attempted_at=_parse_datetime(data['attempted_at']),
            hints_used=data.get('hints_used', 0),
            time_spent_seconds=data.get('time_spent_seconds'),
            difficulty=data.get('difficulty')
        )


class GameContext:
    """Facts about the attempt that just finished, used by achievement checks."""

    def __init__(self, attempts: int, is_correct: bool, max_attempts: int = MAX_ATTEMPTS,
                 time_taken: float | None = None, hints_used: int = 0, difficulty: str | None = None,
                 score: int = 0, timestamp: datetime | None = None, puzzle_id: str | None = None,
                 leaderboard_rank: int | None = None, weekly_rank: int | None = None,
                 recent_attempts: list[AttemptRecord] | None = None):
        self.attempts = attempts
        self.is_correct = is_correct
        self.max_attempts = max_attempts
        self.time_taken = time_taken
        self.hints_used = hints_used
        self.difficulty = difficulty
        self.score = score
        self.timestamp = as_utc_naive(timestamp) if timestamp else utc_now()
        self.puzzle_id = puzzle_id
        self.leaderboard_rank = leaderboard_rank
        self.weekly_rank = weekly_rank
        self.recent_attempts = recent_attempts or []

    @classmethod
    def from_dict(cls, data: dict) -> 'GameContext':
        return cls(
            attempts=data['attempts'],
            is_correct=data['is_correct'],
            max_attempts=data.get('max_attempts', MAX_ATTEMPTS),
            time_taken=data.get('time_taken'),
            hints_used=data.get('hints_used', 0),
            difficulty=data.get('difficulty'),
            score=data.get('score', 0),
            timestamp=_parse_datetime(data.get('timestamp')),
            puzzle_id=data.get('puzzle_id'),
            leaderboard_rank=data.get('leaderboard_rank'),
            weekly_rank=data.get('weekly_rank'),
            recent_attempts=[AttemptRecord.from_dict(a) for a in data.get('recent_attempts', [])]
        )


class UserStats:
    """Cumulative player statistics. Owned and persisted by the caller."""

    # Counters that default to zero and round-trip unchanged
    _COUNTERS = [
        'points', 'streak', 'max_streak', 'total_games', 'wins', 'daily_challenge_streak',
        'perfect_solves', 'clutch_solves', 'easy_puzzles_solved', 'medium_puzzles_solved',
        'hard_puzzles_solved', 'no_hint_streak', 'max_no_hint_streak', 'consecutive_perfect',
        'max_consecutive_perfect', 'total_time_played', 'weekend_solves', 'shared_results',
        'categories_completed'
    ]

    def __init__(self):
        self.points = 0
        self.streak = 0
        self.max_streak = 0
        self.total_games = 0
        self.wins = 0
        self.level = 1
        self.daily_challenge_streak = 0
        self.last_play_date = None
        self.achievements = []
        self.perfect_solves = 0          # Solved on the first attempt
        self.clutch_solves = 0           # Solved on the last allowed attempt
        self.easy_puzzles_solved = 0
        self.medium_puzzles_solved = 0
        self.hard_puzzles_solved = 0
        self.no_hint_streak = 0
        self.max_no_hint_streak = 0
        self.consecutive_perfect = 0
        self.max_consecutive_perfect = 0
        self.total_time_played = 0       # seconds
        self.weekend_solves = 0
        self.shared_results = 0
        self.categories_completed = 0
        self.created_at = None
        self.profile_complete = False

    def to_dict(self) -> dict:
        data = {name: getattr(self, name) for name in self._COUNTERS}
        data.update({
            'level': self.level,
            'last_play_date': self.last_play_date.isoformat() if self.last_play_date else None,
            'achievements': list(self.achievements),
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'profile_complete': self.profile_complete
        })
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'UserStats':
        stats = cls()
        # Missing or null counters are zero; anything non-numeric raises here
        for name in cls._COUNTERS:
            value = data.get(name) or 0
            setattr(stats, name, float(value) if name == 'total_time_played' else int(value))
        stats.level = int(data.get('level') or 1)
        stats.last_play_date = _parse_date(data.get('last_play_date'))
        # Deduplicate while keeping unlock order
        stats.achievements = [str(a) for a in dict.fromkeys(data.get('achievements') or [])]
        stats.created_at = _parse_datetime(data.get('created_at'))
        stats.profile_complete = bool(data.get('profile_complete', False))
        return stats

    def _update_daily_streaks(self, won: bool, today: date) -> None:
        consecutive = self.last_play_date == today - timedelta(days=1)
        same_day = self.last_play_date == today

        if not same_day:
            self.daily_challenge_streak = self.daily_challenge_streak + 1 if consecutive else 1

        if not won:
            self.streak = 0
        elif same_day:
            self.streak = max(self.streak, 1)
        elif consecutive:
            self.streak += 1
        else:
            self.streak = 1
        self.max_streak = max(self.max_streak, self.streak)

    def record_game(self, won: bool, points: int = 0, attempts: int = 1,
                    max_attempts: int = MAX_ATTEMPTS, time_taken: float | None = None,
                    hints_used: int = 0, difficulty: str | None = None,
                    played_at: datetime | None = None) -> None:
        """Fold a finished puzzle into the stats. A loss resets the streak."""
        from .scoring import calculate_level

        played_at = as_utc_naive(played_at) if played_at else utc_now()
        if self.created_at is None:
            self.created_at = played_at

        self.total_games += 1
        self._update_daily_streaks(won, played_at.date())
        self.last_play_date = played_at.date()
        if time_taken:
            self.total_time_played += time_taken

        if not won:
            self.consecutive_perfect = 0
            self.no_hint_streak = 0
            return

        self.wins += 1
        self.points += points
        self.level = calculate_level(self.points)

        if attempts == 1:
            self.perfect_solves += 1
            self.consecutive_perfect += 1
        else:
            self.consecutive_perfect = 0
        self.max_consecutive_perfect = max(self.max_consecutive_perfect, self.consecutive_perfect)

        if attempts >= max_attempts:
            self.clutch_solves += 1

        if hints_used == 0:
            self.no_hint_streak += 1
        else:
            self.no_hint_streak = 0
        self.max_no_hint_streak = max(self.max_no_hint_streak, self.no_hint_streak)

        if difficulty in DIFFICULTIES:
            counter = f'{difficulty}_puzzles_solved'
            setattr(self, counter, getattr(self, counter) + 1)

        if played_at.weekday() >= 5:
            self.weekend_solves += 1

    def unlock(self, achievement_ids: list[str]) -> None:
        """Record newly unlocked achievement ids, ignoring ones already held."""
        for achievement_id in achievement_ids:
            if achievement_id not in self.achievements:
                self.achievements.append(achievement_id)

    def get_win_rate(self) -> float:
        """Win percentage (0-100); zero before the first game."""
        if not self.total_games:
            return 0.0
        return self.wins / self.total_games * 100
