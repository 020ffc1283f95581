"""Tests for the rebuzzle HTTP API."""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fastapi.testclient import TestClient

import server.app
from rebuzzle.interfaces import SemanticJudge
from rebuzzle.models import GuessAttempt, JudgeVerdict


class MockJudge(SemanticJudge):
    """Mock judge that records calls and returns a canned verdict."""

    def __init__(self, verdict: JudgeVerdict):
        self.verdict = verdict
        self.calls = []

    async def judge(self, attempt: GuessAttempt) -> JudgeVerdict:
        self.calls.append(attempt)
        return self.verdict

    def get_stats(self) -> dict:
        return {'calls': len(self.calls)}


class TestAPI(unittest.TestCase):
    """Tests for the API endpoints, running without a Gemini key."""

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        patcher = patch.dict(os.environ, {'REBUZZLE_CONFIG': str(Path(tmp.name) / 'config.json')})
        patcher.start()
        self.addCleanup(patcher.stop)
        os.environ.pop('GEMINI_API_KEY', None)

        self.client = TestClient(server.app.app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    def use_judge(self, verdict: JudgeVerdict) -> MockJudge:
        judge = MockJudge(verdict)
        server.app.judge = judge
        self.addCleanup(setattr, server.app, 'judge', None)
        return judge

    def test_root(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok", "judge_enabled": False})

    def test_validate_normalized(self):
        response = self.client.post("/api/validate", json={'guess': "SUNFLOWER", 'correct_answer': "sunflower"})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data['is_correct'])
        self.assertEqual(data['method'], 'normalized')
        self.assertEqual(data['confidence'], 1.0)

    def test_validate_without_judge_rejects_fuzzy(self):
        response = self.client.post("/api/validate", json={'guess': "flour power", 'correct_answer': "flower power"})
        data = response.json()
        self.assertFalse(data['is_correct'])
        self.assertEqual(data['method'], 'fuzzy')
        self.assertEqual(len(data['suggestions']), 2)

    def test_validate_with_judge(self):
        judge = self.use_judge(JudgeVerdict(True, 0.88, "Sounds the same"))
        response = self.client.post("/api/validate", json={
            'guess': "flour power",
            'correct_answer': "flower power",
            'puzzle_context': "A flower over POWER"
        })
        data = response.json()
        self.assertTrue(data['is_correct'])
        self.assertEqual(data['method'], 'ai')
        self.assertEqual(data['reasoning'], "Sounds the same")
        self.assertEqual(judge.calls[0].puzzle_context, "A flower over POWER")

    def test_validate_missing_field(self):
        response = self.client.post("/api/validate", json={'guess': "sunflower"})
        self.assertEqual(response.status_code, 422)

    def test_feedback(self):
        response = self.client.post("/api/feedback", json={
            'guess': "sunflowr", 'correct_answer': "sunflower", 'attempts_left': 1
        })
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['feedback'], "So close! Check your spelling. 1 attempt left.")

    def test_score(self):
        response = self.client.post("/api/score", json={
            'time_taken_seconds': 20, 'streak_days': 3, 'difficulty_level': 7
        })
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['speed_bonus'], 50)
        self.assertEqual(data['total_score'], 195)

    def test_score_rejects_negative_time(self):
        response = self.client.post("/api/score", json={'time_taken_seconds': -1})
        self.assertEqual(response.status_code, 422)

    def test_level(self):
        response = self.client.get("/api/level", params={'points': 2500})
        self.assertEqual(response.json(), {
            'current_level': 3, 'points_in_current_level': 500, 'points_needed': 500
        })

    def test_level_negative(self):
        response = self.client.get("/api/level", params={'points': -1})
        self.assertEqual(response.status_code, 400)

    def test_achievements_hide_secret(self):
        data = self.client.get("/api/achievements").json()
        ids = [a['id'] for a in data['achievements']]
        self.assertIn('first_steps', ids)
        self.assertNotIn('puzzle_god', ids)
        self.assertEqual(data['total'], len(ids))

    def test_achievements_filter(self):
        data = self.client.get("/api/achievements", params={'category': 'beginner', 'include_secret': True}).json()
        self.assertEqual(data['total'], 10)
        self.assertTrue(all(a['category'] == 'beginner' for a in data['achievements']))

    def test_achievements_unknown_category(self):
        response = self.client.get("/api/achievements", params={'category': 'cooking'})
        self.assertEqual(response.status_code, 400)

    def test_evaluate(self):
        response = self.client.post("/api/achievements/evaluate", json={
            'stats': {'total_games': 1, 'wins': 1, 'points': 150, 'streak': 1, 'achievements': ['first_steps']},
            'context': {'attempts': 1, 'is_correct': True, 'time_taken': 25, 'timestamp': '2026-03-04T12:00:00'}
        })
        self.assertEqual(response.status_code, 200)
        data = response.json()
        ids = [a['id'] for a in data['unlocked']]
        self.assertNotIn('first_steps', ids)
        self.assertIn('speed_solver', ids)
        self.assertIn('point_collector', ids)
        self.assertEqual(data['points'], sum(a['points'] for a in data['unlocked']))
        self.assertEqual(data['progress']['unlocked'], len(ids) + 1)

    def test_evaluate_utc_timestamps(self):
        response = self.client.post("/api/achievements/evaluate", json={
            'stats': {'total_games': 1, 'wins': 1, 'created_at': '2026-01-01T00:00:00'},
            'context': {
                'attempts': 1,
                'is_correct': True,
                'timestamp': '2026-03-04T12:00:00Z',
                'recent_attempts': [{'is_correct': True, 'attempted_at': '2026-03-04T08:00:00Z'}]
            }
        })
        self.assertEqual(response.status_code, 200)
        ids = [a['id'] for a in response.json()['unlocked']]
        self.assertIn('account_month', ids)

    def test_evaluate_null_counter(self):
        response = self.client.post("/api/achievements/evaluate", json={
            'stats': {'wins': None, 'total_games': 1},
            'context': {'attempts': 1, 'is_correct': False, 'timestamp': '2026-03-04T12:00:00'}
        })
        self.assertEqual(response.status_code, 200)
        ids = [a['id'] for a in response.json()['unlocked']]
        self.assertIn('first_steps', ids)
        self.assertNotIn('getting_started', ids)

    def test_evaluate_non_numeric_counter(self):
        response = self.client.post("/api/achievements/evaluate", json={
            'stats': {'wins': 'many'},
            'context': {'attempts': 1, 'is_correct': True, 'timestamp': '2026-03-04T12:00:00'}
        })
        self.assertEqual(response.status_code, 400)

    def test_evaluate_bad_context(self):
        response = self.client.post("/api/achievements/evaluate", json={
            'stats': {}, 'context': {'attempts': 1, 'is_correct': True, 'timestamp': 'yesterday'}
        })
        self.assertEqual(response.status_code, 400)

    def test_judge_stats_disabled(self):
        self.assertEqual(self.client.get("/api/judge/stats").json(), {"enabled": False})

    def test_judge_stats(self):
        self.use_judge(JudgeVerdict(True, 0.9, "OK"))
        self.assertEqual(self.client.get("/api/judge/stats").json(), {"enabled": True, 'calls': 0})


if __name__ == '__main__':
    unittest.main()
