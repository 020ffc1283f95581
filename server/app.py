"""FastAPI server for rebuzzle answer checking, scoring and achievements."""

import logging

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from typing import Optional

logger = logging.getLogger(__name__)

from rebuzzle.achievements import (
    ACHIEVEMENTS, CATEGORIES, RARITIES, CATEGORY_INFO, RARITY_INFO,
    evaluate_achievements, get_achievement_progress
)
from rebuzzle.config import DEFAULT_DIFFICULTY, POINTS_PER_LEVEL, Settings, load_settings
from rebuzzle.interfaces import SemanticJudge
from rebuzzle.models import GameContext, GuessAttempt, UserStats
from rebuzzle.scoring import ScoreInput, calculate_score, points_to_next_level
from rebuzzle.validation import generate_feedback, quick_validate_answer, validate_answer

from server.gemini_judge import GeminiJudge


# Pydantic models for API
class ValidateRequest(BaseModel):
    guess: str
    correct_answer: str
    puzzle_context: Optional[str] = None
    explanation: Optional[str] = None
    use_ai: bool = True


class ValidateResponse(BaseModel):
    is_correct: bool
    confidence: float
    method: str
    reasoning: Optional[str]
    suggestions: Optional[list[str]]


class FeedbackRequest(BaseModel):
    guess: str
    correct_answer: str
    attempts_left: int = Field(ge=0)


class FeedbackResponse(BaseModel):
    feedback: str
    similarity: float


class ScoreRequest(BaseModel):
    time_taken_seconds: float = Field(ge=0)
    wrong_attempts: int = Field(default=0, ge=0)
    streak_days: int = Field(default=0, ge=0)
    difficulty_level: int = DEFAULT_DIFFICULTY
    hints_used: int = Field(default=0, ge=0)


class ScoreResponse(BaseModel):
    base_score: int
    speed_bonus: int
    accuracy_penalty: int
    hint_penalty: int
    streak_bonus: int
    difficulty_bonus: int
    total_score: int


class LevelResponse(BaseModel):
    current_level: int
    points_in_current_level: int
    points_needed: int


class EvaluateRequest(BaseModel):
    stats: dict  # UserStats.to_dict() shape, already updated with this game
    context: dict  # GameContext fields, timestamps in ISO format


class EvaluateResponse(BaseModel):
    unlocked: list[dict]
    points: int
    progress: dict


# Global state (in production, use proper DI)
settings: Settings = None
judge: SemanticJudge = None

app = FastAPI(title="Rebuzzle API", description="Rebus answer validation, scoring and achievements API")


@app.on_event("startup")
async def startup():
    """Load settings and the semantic judge on startup."""
    global settings, judge

    settings = load_settings()

    if not settings.gemini_api_key:
        logger.warning(
            "GEMINI_API_KEY environment variable not set and no key in config file. "
            "Answers will be checked without the semantic judge."
        )
        judge = None
        return

    judge = GeminiJudge(settings.gemini_api_key, model_name=settings.judge_model)
    logger.info(f"Semantic judge initialized: {settings.judge_model}")


@app.get("/")
async def root():
    """Health check."""
    return {"status": "ok", "judge_enabled": judge is not None}


@app.post("/api/validate", response_model=ValidateResponse)
async def validate(request: ValidateRequest):
    """Check a guess against the correct answer."""
    attempt = GuessAttempt(
        text=request.guess,
        correct_answer=request.correct_answer,
        puzzle_context=request.puzzle_context,
        explanation=request.explanation
    )
    verdict = await validate_answer(attempt, judge=judge, config=settings.validation, use_ai=request.use_ai)
    logger.info(f"Validated '{request.guess}': {verdict!r}")
    return ValidateResponse(**verdict.to_dict())


@app.post("/api/feedback", response_model=FeedbackResponse)
async def feedback(request: FeedbackRequest):
    """Encouraging feedback for a wrong guess."""
    quick = quick_validate_answer(request.guess, request.correct_answer)
    message = generate_feedback(request.guess, request.correct_answer, quick['similarity'], request.attempts_left)
    return FeedbackResponse(feedback=message, similarity=quick['similarity'])


@app.post("/api/score", response_model=ScoreResponse)
async def score(request: ScoreRequest):
    """Score a solved puzzle."""
    score_input = ScoreInput(
        time_taken_seconds=request.time_taken_seconds,
        wrong_attempts=request.wrong_attempts,
        streak_days=request.streak_days,
        difficulty_level=request.difficulty_level,
        hints_used=request.hints_used
    )
    breakdown = calculate_score(score_input, settings.scoring)
    return ScoreResponse(**breakdown.to_dict())


@app.get("/api/level", response_model=LevelResponse)
async def level(points: int, points_per_level: int = POINTS_PER_LEVEL):
    """Level for a point total and how far it is to the next one."""
    if points < 0:
        raise HTTPException(status_code=400, detail="points must not be negative")
    if points_per_level <= 0:
        raise HTTPException(status_code=400, detail="points_per_level must be positive")
    return LevelResponse(**points_to_next_level(points, points_per_level))


@app.get("/api/achievements")
async def list_achievements(category: str = None, rarity: str = None, include_secret: bool = False):
    """List achievement definitions, optionally filtered."""
    if category is not None and category not in CATEGORIES:
        raise HTTPException(status_code=400, detail=f"Unknown category: {category}")
    if rarity is not None and rarity not in RARITIES:
        raise HTTPException(status_code=400, detail=f"Unknown rarity: {rarity}")

    achievements = [
        a.to_dict() for a in ACHIEVEMENTS
        if (category is None or a.category == category)
        and (rarity is None or a.rarity == rarity)
        and (include_secret or not a.secret)
    ]
    return {
        "total": len(achievements),
        "achievements": achievements,
        "categories": CATEGORY_INFO,
        "rarities": RARITY_INFO
    }


@app.post("/api/achievements/evaluate", response_model=EvaluateResponse)
async def evaluate(request: EvaluateRequest):
    """Return achievements newly unlocked by a finished game."""
    try:
        stats = UserStats.from_dict(request.stats)
        context = GameContext.from_dict(request.context)
    except (KeyError, TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid stats or context: {type(e).__name__}: {e}")

    unlocked = evaluate_achievements(stats, context)
    all_ids = stats.achievements + [a.id for a in unlocked]
    return EvaluateResponse(
        unlocked=[a.to_dict() for a in unlocked],
        points=sum(a.points for a in unlocked),
        progress=get_achievement_progress(all_ids)
    )


@app.get("/api/judge/stats")
async def get_judge_stats():
    """Get semantic judge usage statistics."""
    if judge is None or not hasattr(judge, 'get_stats'):
        return {"enabled": False}
    return {"enabled": True, **judge.get_stats()}
