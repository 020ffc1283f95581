"""Abstract base classes for dependency injection."""

from abc import ABC, abstractmethod

from .models import GuessAttempt, JudgeVerdict


class JudgeError(Exception):
    """The semantic judge failed or replied with something unusable."""


class SemanticJudge(ABC):
    """Abstract base class for a remote semantic answer judge.

    Implementations may be slow, may fail and may retry internally. Callers
    are expected to bound each call with their own timeout.
    """

    @abstractmethod
    async def judge(self, attempt: GuessAttempt) -> JudgeVerdict:
        """Decide whether the guess is an acceptable form of the answer.
        Raises JudgeError (or any other exception) on failure."""
        pass
