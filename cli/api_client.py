"""REST API client for rebuzzle server."""

import requests


class RebuzzleAPIClient:
    """Client for communicating with the rebuzzle REST API."""

    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 30.0):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()

    def _get(self, endpoint: str, params: dict = None) -> dict:
        """Make a GET request."""
        response = self.session.get(f"{self.base_url}{endpoint}", params=params or {}, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def _post(self, endpoint: str, data: dict) -> dict:
        """Make a POST request."""
        response = self.session.post(f"{self.base_url}{endpoint}", json=data, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def health_check(self) -> dict:
        """Check if the server is running."""
        return self._get("/")

    def validate(self, guess: str, correct_answer: str, puzzle_context: str = None,
                 use_ai: bool = True) -> dict:
        """Check a guess against the answer."""
        data = {'guess': guess, 'correct_answer': correct_answer, 'use_ai': use_ai}
        if puzzle_context:
            data['puzzle_context'] = puzzle_context
        return self._post("/api/validate", data)

    def get_feedback(self, guess: str, correct_answer: str, attempts_left: int) -> dict:
        """Get feedback for a wrong guess."""
        return self._post("/api/feedback", {
            'guess': guess,
            'correct_answer': correct_answer,
            'attempts_left': attempts_left
        })

    def score(self, time_taken_seconds: float, wrong_attempts: int = 0, streak_days: int = 0,
              difficulty_level: int = 5, hints_used: int = 0) -> dict:
        """Score a solved puzzle."""
        return self._post("/api/score", {
            'time_taken_seconds': time_taken_seconds,
            'wrong_attempts': wrong_attempts,
            'streak_days': streak_days,
            'difficulty_level': difficulty_level,
            'hints_used': hints_used
        })

    def get_level(self, points: int) -> dict:
        """Get level progress for a point total."""
        return self._get("/api/level", {'points': points})

    def list_achievements(self, category: str = None, rarity: str = None) -> dict:
        """List achievement definitions."""
        params = {}
        if category:
            params['category'] = category
        if rarity:
            params['rarity'] = rarity
        return self._get("/api/achievements", params)

    def evaluate_achievements(self, stats: dict, context: dict) -> dict:
        """Get achievements unlocked by a finished game."""
        return self._post("/api/achievements/evaluate", {'stats': stats, 'context': context})

    def get_judge_stats(self) -> dict:
        """Get semantic judge usage statistics."""
        return self._get("/api/judge/stats")
