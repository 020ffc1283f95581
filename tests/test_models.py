"""Unit tests for rebuzzle domain models."""

import unittest
from datetime import date, datetime, timedelta, timezone

from rebuzzle.models import (
    GuessAttempt, JudgeVerdict, ValidationVerdict, AttemptRecord, GameContext, UserStats
)

MONDAY = datetime(2026, 3, 2, 10, 0)
TUESDAY = datetime(2026, 3, 3, 10, 0)
SATURDAY = datetime(2026, 3, 7, 10, 0)


class TestGuessAttempt(unittest.TestCase):
    """Tests for GuessAttempt."""

    def test_defaults(self):
        attempt = GuessAttempt("sun flower", "sunflower")
        self.assertIsNone(attempt.puzzle_context)
        self.assertIsNone(attempt.explanation)

    def test_immutable(self):
        attempt = GuessAttempt("sun flower", "sunflower")
        with self.assertRaises(AttributeError):
            attempt.text = "other"


class TestVerdicts(unittest.TestCase):
    """Tests for JudgeVerdict and ValidationVerdict."""

    def test_validation_verdict_to_dict(self):
        verdict = ValidationVerdict(True, 1.0, 'normalized', reasoning="Exact match after normalization")
        self.assertEqual(verdict.to_dict(), {
            'is_correct': True,
            'confidence': 1.0,
            'method': 'normalized',
            'reasoning': "Exact match after normalization",
            'suggestions': None
        })

    def test_unknown_method_rejected(self):
        with self.assertRaises(ValueError):
            ValidationVerdict(True, 1.0, 'guesswork')

    def test_judge_verdict_to_dict(self):
        verdict = JudgeVerdict(False, 0.2, "Different meaning", ["Think about flowers"])
        self.assertEqual(verdict.to_dict()['suggestions'], ["Think about flowers"])


class TestGameContext(unittest.TestCase):
    """Tests for GameContext and AttemptRecord."""

    def test_from_dict(self):
        context = GameContext.from_dict({
            'attempts': 2,
            'is_correct': True,
            'time_taken': 42.5,
            'difficulty': 'hard',
            'timestamp': '2026-03-02T10:00:00',
            'leaderboard_rank': 7,
            'recent_attempts': [
                {'is_correct': True, 'attempted_at': '2026-03-01T09:00:00', 'hints_used': 1}
            ]
        })
        self.assertEqual(context.timestamp, MONDAY)
        self.assertEqual(context.max_attempts, 3)
        self.assertEqual(context.leaderboard_rank, 7)
        self.assertIsNone(context.weekly_rank)
        self.assertEqual(len(context.recent_attempts), 1)
        self.assertEqual(context.recent_attempts[0].attempted_at, datetime(2026, 3, 1, 9, 0))
        self.assertEqual(context.recent_attempts[0].hints_used, 1)

    def test_timestamps_normalized_to_naive_utc(self):
        context = GameContext.from_dict({
            'attempts': 1,
            'is_correct': True,
            'timestamp': '2026-03-02T10:00:00Z',
            'recent_attempts': [{'is_correct': True, 'attempted_at': '2026-03-05T01:00:00+02:00'}]
        })
        self.assertEqual(context.timestamp, MONDAY)
        self.assertIsNone(context.timestamp.tzinfo)
        self.assertEqual(context.recent_attempts[0].attempted_at, datetime(2026, 3, 4, 23, 0))

    def test_aware_constructor_arguments_normalized(self):
        tz = timezone(timedelta(hours=-5))
        record = AttemptRecord(True, datetime(2026, 3, 2, 5, 0, tzinfo=tz))
        context = GameContext(attempts=1, is_correct=True, timestamp=datetime(2026, 3, 2, 5, 0, tzinfo=tz))
        self.assertEqual(record.attempted_at, MONDAY)
        self.assertEqual(context.timestamp, MONDAY)

    def test_timestamp_defaults_to_now(self):
        context = GameContext(attempts=1, is_correct=True)
        self.assertIsInstance(context.timestamp, datetime)
        self.assertEqual(context.recent_attempts, [])

    def test_attempt_record_roundtrip(self):
        record = AttemptRecord(True, MONDAY, hints_used=2, time_spent_seconds=12.0, difficulty='easy')
        restored = AttemptRecord.from_dict(record.to_dict())
        self.assertEqual(restored.attempted_at, MONDAY)
        self.assertEqual(restored.difficulty, 'easy')


class TestUserStats(unittest.TestCase):
    """Tests for UserStats."""

    def test_initialization(self):
        stats = UserStats()
        self.assertEqual(stats.points, 0)
        self.assertEqual(stats.level, 1)
        self.assertEqual(stats.achievements, [])
        self.assertIsNone(stats.last_play_date)

    def test_from_dict_coerces_counters(self):
        stats = UserStats.from_dict({'wins': None, 'total_games': '3', 'level': None, 'achievements': None})
        self.assertEqual(stats.wins, 0)
        self.assertEqual(stats.total_games, 3)
        self.assertEqual(stats.level, 1)
        self.assertEqual(stats.achievements, [])

    def test_from_dict_rejects_non_numeric_counters(self):
        with self.assertRaises(ValueError):
            UserStats.from_dict({'wins': 'many'})

    def test_record_game_with_aware_time(self):
        stats = UserStats()
        stats.record_game(True, points=100, played_at=datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc))
        self.assertEqual(stats.created_at, MONDAY)

    def test_from_dict_deduplicates_achievements(self):
        stats = UserStats.from_dict({'wins': 3, 'achievements': ['first_steps', 'getting_started', 'first_steps']})
        self.assertEqual(stats.wins, 3)
        self.assertEqual(stats.achievements, ['first_steps', 'getting_started'])

    def test_roundtrip(self):
        stats = UserStats()
        stats.record_game(True, points=150, played_at=MONDAY)
        restored = UserStats.from_dict(stats.to_dict())
        self.assertEqual(restored.to_dict(), stats.to_dict())
        self.assertEqual(restored.last_play_date, date(2026, 3, 2))

    def test_record_first_win(self):
        stats = UserStats()
        stats.record_game(True, points=150, attempts=1, time_taken=40, played_at=MONDAY)
        self.assertEqual(stats.total_games, 1)
        self.assertEqual(stats.wins, 1)
        self.assertEqual(stats.points, 150)
        self.assertEqual(stats.streak, 1)
        self.assertEqual(stats.perfect_solves, 1)
        self.assertEqual(stats.consecutive_perfect, 1)
        self.assertEqual(stats.no_hint_streak, 1)
        self.assertEqual(stats.total_time_played, 40)
        self.assertEqual(stats.created_at, MONDAY)
        self.assertEqual(stats.last_play_date, date(2026, 3, 2))

    def test_consecutive_days_extend_streak(self):
        stats = UserStats()
        stats.record_game(True, points=100, attempts=1, played_at=MONDAY)
        stats.record_game(True, points=100, attempts=3, max_attempts=3, hints_used=1, played_at=TUESDAY)
        self.assertEqual(stats.streak, 2)
        self.assertEqual(stats.max_streak, 2)
        self.assertEqual(stats.daily_challenge_streak, 2)
        self.assertEqual(stats.clutch_solves, 1)
        self.assertEqual(stats.consecutive_perfect, 0)
        self.assertEqual(stats.max_consecutive_perfect, 1)
        self.assertEqual(stats.no_hint_streak, 0)
        self.assertEqual(stats.max_no_hint_streak, 1)

    def test_same_day_keeps_streak(self):
        stats = UserStats()
        stats.record_game(True, points=100, played_at=MONDAY)
        stats.record_game(True, points=100, played_at=MONDAY.replace(hour=18))
        self.assertEqual(stats.streak, 1)
        self.assertEqual(stats.daily_challenge_streak, 1)
        self.assertEqual(stats.wins, 2)

    def test_gap_restarts_streak(self):
        stats = UserStats()
        stats.record_game(True, points=100, played_at=MONDAY)
        stats.record_game(True, points=100, played_at=TUESDAY)
        stats.record_game(True, points=100, played_at=datetime(2026, 3, 10, 10, 0))
        self.assertEqual(stats.streak, 1)
        self.assertEqual(stats.max_streak, 2)

    def test_loss_resets_streak(self):
        stats = UserStats()
        stats.record_game(True, points=100, played_at=MONDAY)
        stats.record_game(False, attempts=3, played_at=TUESDAY)
        self.assertEqual(stats.streak, 0)
        self.assertEqual(stats.max_streak, 1)
        self.assertEqual(stats.total_games, 2)
        self.assertEqual(stats.wins, 1)
        self.assertEqual(stats.points, 100)

    def test_level_follows_points(self):
        stats = UserStats()
        stats.record_game(True, points=1200, played_at=MONDAY)
        self.assertEqual(stats.level, 2)

    def test_difficulty_and_weekend_counters(self):
        stats = UserStats()
        stats.record_game(True, points=100, difficulty='hard', played_at=SATURDAY)
        stats.record_game(True, points=100, difficulty='easy', played_at=MONDAY)
        self.assertEqual(stats.hard_puzzles_solved, 1)
        self.assertEqual(stats.easy_puzzles_solved, 1)
        self.assertEqual(stats.medium_puzzles_solved, 0)
        self.assertEqual(stats.weekend_solves, 1)

    def test_unlock_ignores_duplicates(self):
        stats = UserStats()
        stats.unlock(['first_steps', 'first_steps', 'quick_thinker'])
        stats.unlock(['quick_thinker'])
        self.assertEqual(stats.achievements, ['first_steps', 'quick_thinker'])

    def test_win_rate(self):
        stats = UserStats()
        self.assertEqual(stats.get_win_rate(), 0.0)
        stats.total_games = 4
        stats.wins = 3
        self.assertEqual(stats.get_win_rate(), 75.0)


if __name__ == '__main__':
    unittest.main()
