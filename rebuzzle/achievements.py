"""Achievement definitions and unlock checks.

100 achievements ranging from easy to extremely hard. Each definition carries
a criteria dict such as {'type': 'puzzles_solved', 'count': 25}; every
criteria type maps to exactly one check in CRITERIA_CHECKS.
"""

import logging
from datetime import datetime, timedelta

from .models import GameContext, UserStats, as_utc_naive

logger = logging.getLogger(__name__)

CATEGORIES = ('beginner', 'solving', 'speed', 'streaks', 'mastery',
              'social', 'explorer', 'collector', 'elite', 'legendary')
RARITIES = ('common', 'uncommon', 'rare', 'epic', 'legendary')


class AchievementDefinition:
    """Static description of one achievement."""

    def __init__(self, id: str, name: str, description: str, hint: str, icon: str,
                 category: str, rarity: str, points: int, criteria: dict, order: int,
                 secret: bool = False):
        self.id = id
        self.name = name
        self.description = description
        self.hint = hint
        self.icon = icon
        self.category = category
        self.rarity = rarity
        self.points = points
        self.criteria = criteria
        self.order = order
        self.secret = secret

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'hint': self.hint,
            'icon': self.icon,
            'category': self.category,
            'rarity': self.rarity,
            'points': self.points,
            'criteria': dict(self.criteria),
            'order': self.order,
            'secret': self.secret
        }

    def __repr__(self) -> str:
        return f"AchievementDefinition({self.id!r})"


A = AchievementDefinition

# ============================================================================
# Achievement table
# ============================================================================

ACHIEVEMENTS = [
    # Beginner - easy to get, welcome new players
    A('first_steps', "First Steps", "Solved your very first puzzle", "Complete any puzzle to unlock",
      'star', 'beginner', 'common', 10, {'type': 'first_puzzle'}, 1),
    A('getting_started', "Getting Started", "Solved 5 puzzles", "Keep solving puzzles!",
      'puzzle', 'beginner', 'common', 15, {'type': 'puzzles_solved', 'count': 5}, 2),
    A('puzzle_apprentice', "Puzzle Apprentice", "Solved 10 puzzles", "You're getting the hang of it!",
      'book', 'beginner', 'common', 20, {'type': 'puzzles_solved', 'count': 10}, 3),
    A('first_perfect', "Nailed It!", "Solved a puzzle on your first attempt", "Get it right the first time",
      'target', 'beginner', 'common', 25, {'type': 'perfect_solves', 'count': 1}, 4, secret=True),
    A('streak_starter', "Streak Starter", "Achieved a 2-day solving streak", "Play two days in a row",
      'flame', 'beginner', 'common', 20, {'type': 'streak_days', 'count': 2}, 5),
    A('hint_helper', "Hint Helper", "Used hints to solve 3 puzzles", "Hints are there to help!",
      'gift', 'beginner', 'common', 10, {'type': 'hints_used_total', 'count': 3}, 6),
    A('point_collector', "Point Collector", "Earned your first 100 points", "Points add up quickly",
      'gem', 'beginner', 'common', 15, {'type': 'total_points', 'points': 100}, 7),
    A('level_up', "Level Up!", "Reached level 2", "Keep earning points to level up",
      'rocket', 'beginner', 'common', 20, {'type': 'level_reached', 'level': 2}, 8),
    A('daily_player', "Daily Player", "Completed your first daily challenge", "Try the daily puzzle",
      'calendar', 'beginner', 'common', 15, {'type': 'daily_challenges', 'count': 1}, 9),
    A('one_week_old', "One Week Old", "Account is one week old", "Time flies when you're having fun",
      'heart', 'beginner', 'common', 10, {'type': 'account_age_days', 'days': 7}, 10),

    # Solving - total puzzles solved milestones
    A('puzzle_solver', "Puzzle Solver", "Solved 25 puzzles", "Keep at it!",
      'puzzle', 'solving', 'common', 30, {'type': 'puzzles_solved', 'count': 25}, 11),
    A('half_century', "Half Century", "Solved 50 puzzles", "Halfway to a hundred!",
      'medal', 'solving', 'uncommon', 50, {'type': 'puzzles_solved', 'count': 50}, 12),
    A('century_club', "Century Club", "Solved 100 puzzles", "A true centurion",
      'trophy', 'solving', 'uncommon', 100, {'type': 'puzzles_solved', 'count': 100}, 13),
    A('puzzle_enthusiast', "Puzzle Enthusiast", "Solved 200 puzzles", "Puzzles are your passion",
      'star', 'solving', 'rare', 150, {'type': 'puzzles_solved', 'count': 200}, 14),
    A('puzzle_master', "Puzzle Master", "Solved 500 puzzles", "Master of the puzzles",
      'crown', 'solving', 'epic', 300, {'type': 'puzzles_solved', 'count': 500}, 15),
    A('puzzle_legend', "Puzzle Legend", "Solved 1000 puzzles", "Legendary status achieved",
      'crown', 'solving', 'legendary', 500, {'type': 'puzzles_solved', 'count': 1000}, 16),
    A('pure_skill_5', "Sharp Mind", "Solved 5 puzzles without hints", "Trust your instincts",
      'brain', 'solving', 'common', 25, {'type': 'puzzles_solved_no_hints', 'count': 5}, 17),
    A('pure_skill_25', "No Assistance Needed", "Solved 25 puzzles without hints", "Who needs hints anyway?",
      'brain', 'solving', 'uncommon', 75, {'type': 'puzzles_solved_no_hints', 'count': 25}, 18),
    A('pure_skill_100', "Hint Free Zone", "Solved 100 puzzles without hints", "Hints? What hints?",
      'brain', 'solving', 'rare', 200, {'type': 'puzzles_solved_no_hints', 'count': 100}, 19),
    A('perfectionist_10', "Perfectionist", "10 perfect solves (first attempt)", "Practice makes perfect",
      'target', 'solving', 'uncommon', 75, {'type': 'perfect_solves', 'count': 10}, 20),
    A('perfectionist_50', "Flawless", "50 perfect solves (first attempt)", "Consistently perfect",
      'target', 'solving', 'rare', 200, {'type': 'perfect_solves', 'count': 50}, 21),
    A('perfectionist_100', "Untouchable", "100 perfect solves (first attempt)", "Perfection incarnate",
      'target', 'solving', 'epic', 400, {'type': 'perfect_solves', 'count': 100}, 22),
    A('clutch_player', "Clutch Player", "Won 5 puzzles on the last attempt", "Never give up!",
      'trophy', 'solving', 'uncommon', 50, {'type': 'clutch_solves', 'count': 5}, 23, secret=True),
    A('clutch_master', "Clutch Master", "Won 25 puzzles on the last attempt", "Thrives under pressure",
      'trophy', 'solving', 'rare', 150, {'type': 'clutch_solves', 'count': 25}, 24),
    A('never_surrender', "Never Surrender", "Won 100 puzzles on the last attempt", "The ultimate clutch player",
      'shield', 'solving', 'epic', 350, {'type': 'clutch_solves', 'count': 100}, 25),

    # Speed
    A('quick_thinker', "Quick Thinker", "Solved a puzzle in under 60 seconds", "Speed is key",
      'clock', 'speed', 'common', 20, {'type': 'speed_solve', 'seconds': 60}, 26),
    A('speed_solver', "Speed Solver", "Solved a puzzle in under 30 seconds", "Lightning fast!",
      'zap', 'speed', 'uncommon', 40, {'type': 'speed_solve', 'seconds': 30}, 27),
    A('lightning_fast', "Lightning Fast", "Solved a puzzle in under 15 seconds", "Blink and you'll miss it",
      'lightning', 'speed', 'rare', 100, {'type': 'speed_solve', 'seconds': 15}, 28),
    A('instant_genius', "Instant Genius", "Solved a puzzle in under 10 seconds", "Are you even human?",
      'lightning', 'speed', 'epic', 200, {'type': 'speed_solve', 'seconds': 10}, 29, secret=True),
    A('speed_demon_5', "Speed Demon", "Solved 5 puzzles in under 30 seconds each", "Consistently quick",
      'zap', 'speed', 'uncommon', 60, {'type': 'speed_solve_count', 'seconds': 30, 'count': 5}, 30),
    A('speed_demon_25', "Velocity Master", "Solved 25 puzzles in under 30 seconds each", "Speed is your middle name",
      'zap', 'speed', 'rare', 150, {'type': 'speed_solve_count', 'seconds': 30, 'count': 25}, 31),
    A('speed_demon_100', "The Flash", "Solved 100 puzzles in under 30 seconds each", "Faster than light",
      'lightning', 'speed', 'epic', 400, {'type': 'speed_solve_count', 'seconds': 30, 'count': 100}, 32),
    A('sub_15_master', "Sub-15 Master", "Solved 10 puzzles in under 15 seconds each", "Blazing speed",
      'lightning', 'speed', 'rare', 200, {'type': 'speed_solve_count', 'seconds': 15, 'count': 10}, 33),
    A('sub_15_legend', "Sub-15 Legend", "Solved 50 puzzles in under 15 seconds each", "Inhuman reflexes",
      'lightning', 'speed', 'legendary', 500, {'type': 'speed_solve_count', 'seconds': 15, 'count': 50}, 34),
    A('time_attack_5', "Time Attack", "Solved 5 puzzles in a single day", "Productive day!",
      'clock', 'speed', 'common', 25, {'type': 'games_in_day', 'count': 5}, 35),
    A('time_attack_10', "Marathon Runner", "Solved 10 puzzles in a single day", "What a session!",
      'clock', 'speed', 'uncommon', 50, {'type': 'games_in_day', 'count': 10}, 36),
    A('time_attack_25', "Puzzle Marathoner", "Solved 25 puzzles in a single day", "Dedication!",
      'medal', 'speed', 'rare', 150, {'type': 'games_in_day', 'count': 25}, 37),
    A('weekly_warrior', "Weekly Warrior", "Solved 20 puzzles in a single week", "Great week!",
      'sword', 'speed', 'uncommon', 50, {'type': 'weekly_puzzles', 'count': 20}, 38),
    A('weekly_champion', "Weekly Champion", "Solved 50 puzzles in a single week", "What a week!",
      'trophy', 'speed', 'rare', 150, {'type': 'weekly_puzzles', 'count': 50}, 39),
    A('total_playtime', "Dedicated Player", "Played for a total of 10 hours", "Time well spent",
      'clock', 'speed', 'rare', 100, {'type': 'total_time_played', 'minutes': 600}, 40),

    # Streaks
    A('three_day_streak', "Three in a Row", "3-day solving streak", "Keep the momentum!",
      'flame', 'streaks', 'common', 25, {'type': 'streak_days', 'count': 3}, 41),
    A('week_streak', "Perfect Week", "7-day solving streak", "A full week!",
      'flame', 'streaks', 'uncommon', 50, {'type': 'streak_days', 'count': 7}, 42),
    A('two_week_streak', "Fortnight Fighter", "14-day solving streak", "Two weeks strong!",
      'flame', 'streaks', 'rare', 100, {'type': 'streak_days', 'count': 14}, 43),
    A('month_streak', "Month Master", "30-day solving streak", "A full month!",
      'flame', 'streaks', 'rare', 200, {'type': 'streak_days', 'count': 30}, 44),
    A('60_day_streak', "Two Month Titan", "60-day solving streak", "Incredible dedication!",
      'flame', 'streaks', 'epic', 350, {'type': 'streak_days', 'count': 60}, 45),
    A('90_day_streak', "Quarter Year Champion", "90-day solving streak", "Three months straight!",
      'flame', 'streaks', 'epic', 500, {'type': 'streak_days', 'count': 90}, 46),
    A('half_year_streak', "Half Year Hero", "180-day solving streak", "Six months of dedication!",
      'crown', 'streaks', 'legendary', 750, {'type': 'streak_days', 'count': 180}, 47),
    A('year_streak', "Year-Round Champion", "365-day solving streak", "A full year! Incredible!",
      'crown', 'streaks', 'legendary', 1000, {'type': 'streak_days', 'count': 365}, 48),
    A('comeback_king', "Comeback King", "Won after using 3+ attempts", "Never give up!",
      'trophy', 'streaks', 'common', 20, {'type': 'comeback', 'behind_attempts': 3}, 49),
    A('no_hints_streak_5', "Hint-Free Streak", "5 consecutive puzzles without hints", "Trust yourself!",
      'star', 'streaks', 'uncommon', 50, {'type': 'no_hints_streak', 'count': 5}, 50),
    A('no_hints_streak_15', "Self-Reliant", "15 consecutive puzzles without hints", "Who needs help?",
      'star', 'streaks', 'rare', 125, {'type': 'no_hints_streak', 'count': 15}, 51),
    A('no_hints_streak_30', "Solo Master", "30 consecutive puzzles without hints", "Completely independent",
      'brain', 'streaks', 'epic', 250, {'type': 'no_hints_streak', 'count': 30}, 52),
    A('perfect_streak_3', "Triple Threat", "3 consecutive perfect solves", "Three in a row!",
      'target', 'streaks', 'uncommon', 75, {'type': 'consecutive_perfect', 'count': 3}, 53),
    A('perfect_streak_7', "Perfect Week", "7 consecutive perfect solves", "A perfect week!",
      'target', 'streaks', 'rare', 200, {'type': 'consecutive_perfect', 'count': 7}, 54, secret=True),
    A('perfect_streak_14', "Flawless Fortnight", "14 consecutive perfect solves", "Two weeks of perfection!",
      'crown', 'streaks', 'legendary', 500, {'type': 'consecutive_perfect', 'count': 14}, 55),

    # Mastery - points, levels, expertise
    A('points_500', "Rising Star", "Earned 500 total points", "Points are adding up!",
      'gem', 'mastery', 'common', 30, {'type': 'total_points', 'points': 500}, 56),
    A('points_1000', "Point Thousand", "Earned 1,000 total points", "A grand milestone!",
      'gem', 'mastery', 'uncommon', 50, {'type': 'total_points', 'points': 1000}, 57),
    A('points_5000', "High Scorer", "Earned 5,000 total points", "Climbing the ranks!",
      'trophy', 'mastery', 'rare', 150, {'type': 'total_points', 'points': 5000}, 58),
    A('points_10000', "Ten Thousand Strong", "Earned 10,000 total points", "Elite status!",
      'crown', 'mastery', 'epic', 300, {'type': 'total_points', 'points': 10000}, 59),
    A('points_50000', "Point Legend", "Earned 50,000 total points", "Legendary scorer!",
      'crown', 'mastery', 'legendary', 500, {'type': 'total_points', 'points': 50000}, 60),
    A('level_5', "Level 5", "Reached level 5", "Keep leveling up!",
      'rocket', 'mastery', 'common', 25, {'type': 'level_reached', 'level': 5}, 61),
    A('level_10', "Double Digits", "Reached level 10", "In the double digits!",
      'rocket', 'mastery', 'uncommon', 75, {'type': 'level_reached', 'level': 10}, 62),
    A('level_25', "Quarter Century", "Reached level 25", "A major milestone!",
      'medal', 'mastery', 'rare', 200, {'type': 'level_reached', 'level': 25}, 63),
    A('level_50', "Halfway Master", "Reached level 50", "Halfway to the top!",
      'crown', 'mastery', 'epic', 400, {'type': 'level_reached', 'level': 50}, 64),
    A('level_100', "Centurion", "Reached level 100", "The ultimate level!",
      'crown', 'mastery', 'legendary', 1000, {'type': 'level_reached', 'level': 100}, 65),
    A('win_rate_70', "Consistent Winner", "Maintained 70%+ win rate (50+ games)", "Win more than you lose!",
      'target', 'mastery', 'uncommon', 75, {'type': 'win_rate', 'percentage': 70, 'min_games': 50}, 66),
    A('win_rate_80', "Dominant Force", "Maintained 80%+ win rate (100+ games)", "Winning is your habit!",
      'trophy', 'mastery', 'rare', 200, {'type': 'win_rate', 'percentage': 80, 'min_games': 100}, 67),
    A('win_rate_90', "Near Perfect Record", "Maintained 90%+ win rate (200+ games)", "Almost unbeatable!",
      'crown', 'mastery', 'epic', 400, {'type': 'win_rate', 'percentage': 90, 'min_games': 200}, 68),
    A('daily_10', "Daily Regular", "Completed 10 daily challenges", "Come back daily!",
      'calendar', 'mastery', 'common', 30, {'type': 'daily_challenges', 'count': 10}, 69),
    A('daily_100', "Daily Devotee", "Completed 100 daily challenges", "A true daily player!",
      'calendar', 'mastery', 'rare', 200, {'type': 'daily_challenges', 'count': 100}, 70),

    # Explorer - difficulty and variety
    A('easy_10', "Easy Street", "Solved 10 easy puzzles", "Start with the basics!",
      'puzzle', 'explorer', 'common', 15, {'type': 'difficulty_easy', 'count': 10}, 71),
    A('easy_50', "Easy Expert", "Solved 50 easy puzzles", "Easy doesn't mean boring!",
      'puzzle', 'explorer', 'uncommon', 50, {'type': 'difficulty_easy', 'count': 50}, 72),
    A('medium_10', "Middle Ground", "Solved 10 medium puzzles", "Finding balance!",
      'puzzle', 'explorer', 'common', 25, {'type': 'difficulty_medium', 'count': 10}, 73),
    A('medium_50', "Medium Master", "Solved 50 medium puzzles", "The sweet spot!",
      'medal', 'explorer', 'uncommon', 75, {'type': 'difficulty_medium', 'count': 50}, 74),
    A('hard_10', "Challenge Seeker", "Solved 10 hard puzzles", "Brave enough to try hard!",
      'sword', 'explorer', 'uncommon', 50, {'type': 'difficulty_hard', 'count': 10}, 75),
    A('hard_50', "Hardened Veteran", "Solved 50 hard puzzles", "Hard mode is your home!",
      'shield', 'explorer', 'rare', 150, {'type': 'difficulty_hard', 'count': 50}, 76),
    A('hard_100', "The Hard Way", "Solved 100 hard puzzles", "No challenge too difficult!",
      'crown', 'explorer', 'epic', 300, {'type': 'difficulty_hard', 'count': 100}, 77),
    A('all_difficulties_day', "Well-Rounded", "Solved easy, medium, and hard puzzles in one day",
      "Try all difficulties!", 'sparkles', 'explorer', 'uncommon', 40, {'type': 'all_difficulties_in_day'}, 78),
    A('hard_perfect', "Perfect Storm", "Perfect solve on a hard puzzle", "First try on hard!",
      'crown', 'explorer', 'rare', 100, {'type': 'custom', 'check': 'hard_perfect_solve'}, 79, secret=True),
    A('hard_speed', "Speed Demon Hard", "Solved a hard puzzle in under 30 seconds", "Fast and furious on hard!",
      'lightning', 'explorer', 'epic', 200, {'type': 'custom', 'check': 'hard_speed_solve'}, 80, secret=True),

    # Social
    A('share_first', "Social Butterfly", "Shared your first result", "Share with friends!",
      'heart', 'social', 'common', 15, {'type': 'share_result'}, 81),
    A('profile_complete', "All Set Up", "Completed your profile", "Fill out your profile!",
      'star', 'social', 'common', 10, {'type': 'profile_complete'}, 82),
    A('leaderboard_top_100', "Top 100", "Reached top 100 on the leaderboard", "Climb the ranks!",
      'medal', 'social', 'rare', 100, {'type': 'leaderboard_top', 'position': 100}, 83),
    A('leaderboard_top_50', "Top 50", "Reached top 50 on the leaderboard", "Elite territory!",
      'trophy', 'social', 'epic', 200, {'type': 'leaderboard_top', 'position': 50}, 84),
    A('leaderboard_top_10', "Top 10", "Reached top 10 on the leaderboard", "Almost the best!",
      'crown', 'social', 'epic', 350, {'type': 'leaderboard_top', 'position': 10}, 85),
    A('leaderboard_top_1', "Number One", "Reached #1 on the leaderboard", "Be the best!",
      'crown', 'social', 'legendary', 500, {'type': 'leaderboard_top', 'position': 1}, 86),
    A('weekly_top_10', "Weekly Star", "Top 10 on weekly leaderboard", "Dominate the week!",
      'star', 'social', 'rare', 100, {'type': 'leaderboard_top_weekly', 'position': 10}, 87),
    A('account_month', "One Month Old", "Account is one month old", "Welcome to the club!",
      'calendar', 'social', 'common', 25, {'type': 'account_age_days', 'days': 30}, 88),
    A('account_year', "One Year Strong", "Account is one year old", "A whole year!",
      'heart', 'social', 'rare', 150, {'type': 'account_age_days', 'days': 365}, 89),
    A('weekend_warrior', "Weekend Warrior", "Solved 20 puzzles on weekends", "Weekend puzzle sessions!",
      'sword', 'social', 'uncommon', 50, {'type': 'weekend_warrior', 'count': 20}, 90, secret=True),

    # Legendary - the rarest
    A('night_owl', "Night Owl", "Solved a puzzle after midnight", "Burn the midnight oil",
      'star', 'legendary', 'uncommon', 30, {'type': 'night_owl', 'hour': 0}, 91, secret=True),
    A('early_bird', "Early Bird", "Solved a puzzle before 6 AM", "Rise and shine!",
      'sparkles', 'legendary', 'uncommon', 30, {'type': 'early_bird', 'hour': 6}, 92, secret=True),
    A('new_year_solver', "New Year Solver", "Solved a puzzle on New Year's Day", "Start the year right",
      'sparkles', 'legendary', 'rare', 100, {'type': 'special_date', 'date': '01-01'}, 93, secret=True),
    A('valentines_solver', "Puzzle Love", "Solved a puzzle on Valentine's Day", "Share the love of puzzles",
      'heart', 'legendary', 'rare', 75, {'type': 'special_date', 'date': '02-14'}, 94, secret=True),
    A('halloween_solver', "Spooky Solver", "Solved a puzzle on Halloween", "Trick or treat!",
      'sparkles', 'legendary', 'rare', 75, {'type': 'special_date', 'date': '10-31'}, 95, secret=True),
    A('christmas_solver', "Holiday Spirit", "Solved a puzzle on Christmas", "Holiday puzzle cheer!",
      'gift', 'legendary', 'rare', 75, {'type': 'special_date', 'date': '12-25'}, 96, secret=True),
    A('ultimate_master', "Ultimate Master", "Unlocked 75 achievements", "Collect them all!",
      'crown', 'legendary', 'epic', 500, {'type': 'custom', 'check': 'achievements_unlocked_75'}, 97),
    A('completionist', "Completionist", "Unlocked 90 achievements", "Almost there!",
      'crown', 'legendary', 'legendary', 750, {'type': 'custom', 'check': 'achievements_unlocked_90'}, 98),
    A('the_collector', "The Collector", "Unlocked all 100 achievements", "The ultimate goal!",
      'crown', 'legendary', 'legendary', 1000, {'type': 'custom', 'check': 'achievements_unlocked_100'}, 99,
      secret=True),
    A('puzzle_god', "Puzzle God", "Level 100 with 365-day streak and 95%+ win rate", "The ultimate puzzle master",
      'crown', 'legendary', 'legendary', 2000, {'type': 'custom', 'check': 'puzzle_god'}, 100, secret=True),
]

del A

CATEGORY_INFO = {
    'beginner': {'name': "Getting Started", 'description': "Welcome to Rebuzzle!", 'icon': 'star'},
    'solving': {'name': "Puzzle Solver", 'description': "Total puzzles solved milestones", 'icon': 'puzzle'},
    'speed': {'name': "Speed Runner", 'description': "Quick solving achievements", 'icon': 'zap'},
    'streaks': {'name': "Streak Master", 'description': "Consistency and dedication", 'icon': 'flame'},
    'mastery': {'name': "Mastery", 'description': "Points, levels, and expertise", 'icon': 'crown'},
    'social': {'name': "Social", 'description': "Community and sharing", 'icon': 'heart'},
    'explorer': {'name': "Explorer", 'description': "Difficulty and variety", 'icon': 'target'},
    'collector': {'name': "Collector", 'description': "Collecting achievements", 'icon': 'gem'},
    'elite': {'name': "Elite", 'description': "Top-tier accomplishments", 'icon': 'trophy'},
    'legendary': {'name': "Legendary", 'description': "The rarest achievements", 'icon': 'sparkles'},
}

RARITY_INFO = {
    'common': {'name': "Common", 'color': 'text-slate-500', 'bg_color': 'bg-slate-500/10'},
    'uncommon': {'name': "Uncommon", 'color': 'text-green-500', 'bg_color': 'bg-green-500/10'},
    'rare': {'name': "Rare", 'color': 'text-blue-500', 'bg_color': 'bg-blue-500/10'},
    'epic': {'name': "Epic", 'color': 'text-purple-500', 'bg_color': 'bg-purple-500/10'},
    'legendary': {'name': "Legendary", 'color': 'text-yellow-500', 'bg_color': 'bg-yellow-500/10'},
}


# ============================================================================
# Criteria checks
# ============================================================================
# Each check takes (criteria, stats, context, unlocked_count) and returns bool.
# Stats are expected to already include the game described by the context.

def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _wins_since(context: GameContext, since: datetime) -> list:
    return [a for a in context.recent_attempts if a.is_correct and a.attempted_at >= since]


def _check_first_puzzle(criteria, stats, context, unlocked_count):
    return stats.total_games >= 1


def _check_puzzles_solved(criteria, stats, context, unlocked_count):
    return stats.wins >= criteria['count']


def _check_puzzles_solved_no_hints(criteria, stats, context, unlocked_count):
    no_hint_wins = [a for a in context.recent_attempts if a.is_correct and not a.hints_used]
    return len(no_hint_wins) >= criteria['count']


def _check_perfect_solves(criteria, stats, context, unlocked_count):
    return stats.perfect_solves >= criteria['count']


def _check_streak_days(criteria, stats, context, unlocked_count):
    return stats.streak >= criteria['count']


def _check_max_streak(criteria, stats, context, unlocked_count):
    return max(stats.max_streak, stats.streak) >= criteria['count']


def _check_speed_solve(criteria, stats, context, unlocked_count):
    return (context.is_correct and context.time_taken is not None
            and context.time_taken <= criteria['seconds'])


def _check_speed_solve_count(criteria, stats, context, unlocked_count):
    fast_solves = [
        a for a in context.recent_attempts
        if a.is_correct and a.time_spent_seconds is not None and a.time_spent_seconds <= criteria['seconds']
    ]
    return len(fast_solves) >= criteria['count']


def _check_total_points(criteria, stats, context, unlocked_count):
    return stats.points >= criteria['points']


def _check_level_reached(criteria, stats, context, unlocked_count):
    return stats.level >= criteria['level']


def _check_clutch_solves(criteria, stats, context, unlocked_count):
    return stats.clutch_solves >= criteria['count']


def _check_daily_challenges(criteria, stats, context, unlocked_count):
    return stats.daily_challenge_streak >= criteria['count'] or stats.total_games >= criteria['count']


def _check_weekly_puzzles(criteria, stats, context, unlocked_count):
    week_ago = context.timestamp - timedelta(days=7)
    return len(_wins_since(context, week_ago)) >= criteria['count']


def _check_total_attempts(criteria, stats, context, unlocked_count):
    return len(context.recent_attempts) >= criteria['count']


def _check_win_rate(criteria, stats, context, unlocked_count):
    if stats.total_games < criteria['min_games']:
        return False
    return stats.get_win_rate() >= criteria['percentage']


def _difficulty_check(difficulty):
    def check(criteria, stats, context, unlocked_count):
        return getattr(stats, f'{difficulty}_puzzles_solved') >= criteria['count']
    check.__name__ = f'_check_difficulty_{difficulty}'
    return check


def _check_all_difficulties_in_day(criteria, stats, context, unlocked_count):
    today = _wins_since(context, _start_of_day(context.timestamp))
    difficulties = {a.difficulty for a in today if a.difficulty}
    if context.is_correct and context.difficulty:
        difficulties.add(context.difficulty)
    return {'easy', 'medium', 'hard'} <= difficulties


def _check_comeback(criteria, stats, context, unlocked_count):
    return context.is_correct and context.attempts >= criteria['behind_attempts']


def _check_no_hints_streak(criteria, stats, context, unlocked_count):
    return max(stats.no_hint_streak, stats.max_no_hint_streak) >= criteria['count']


def _check_account_age_days(criteria, stats, context, unlocked_count):
    if stats.created_at is None:
        return False
    return (context.timestamp - as_utc_naive(stats.created_at)).days >= criteria['days']


def _check_games_in_day(criteria, stats, context, unlocked_count):
    return len(_wins_since(context, _start_of_day(context.timestamp))) >= criteria['count']


def _check_consecutive_perfect(criteria, stats, context, unlocked_count):
    return max(stats.consecutive_perfect, stats.max_consecutive_perfect) >= criteria['count']


def _check_total_time_played(criteria, stats, context, unlocked_count):
    return stats.total_time_played >= criteria['minutes'] * 60


def _check_categories_completed(criteria, stats, context, unlocked_count):
    return stats.categories_completed >= criteria['count']


def _check_hints_used_total(criteria, stats, context, unlocked_count):
    return sum(a.hints_used or 0 for a in context.recent_attempts) >= criteria['count']


def _check_share_result(criteria, stats, context, unlocked_count):
    return stats.shared_results >= 1


def _check_profile_complete(criteria, stats, context, unlocked_count):
    return bool(stats.profile_complete)


def _check_leaderboard_top(criteria, stats, context, unlocked_count):
    return context.leaderboard_rank is not None and context.leaderboard_rank <= criteria['position']


def _check_leaderboard_top_weekly(criteria, stats, context, unlocked_count):
    return context.weekly_rank is not None and context.weekly_rank <= criteria['position']


def _check_special_date(criteria, stats, context, unlocked_count):
    month, day = (int(part) for part in criteria['date'].split('-'))
    return context.timestamp.month == month and context.timestamp.day == day


def _check_night_owl(criteria, stats, context, unlocked_count):
    # Between midnight and 5am
    return context.is_correct and 0 <= context.timestamp.hour < 5


def _check_early_bird(criteria, stats, context, unlocked_count):
    return context.is_correct and 5 <= context.timestamp.hour < criteria['hour']


def _check_weekend_warrior(criteria, stats, context, unlocked_count):
    return stats.weekend_solves >= criteria['count']


# Named predicates for criteria that don't fit a generic type
CUSTOM_CHECKS = {
    'hard_perfect_solve': lambda stats, context, unlocked_count: (
        context.is_correct and context.attempts == 1 and context.difficulty == 'hard'),
    'hard_speed_solve': lambda stats, context, unlocked_count: (
        context.is_correct and context.difficulty == 'hard'
        and context.time_taken is not None and context.time_taken < 30),
    'achievements_unlocked_75': lambda stats, context, unlocked_count: unlocked_count >= 75,
    'achievements_unlocked_90': lambda stats, context, unlocked_count: unlocked_count >= 90,
    'achievements_unlocked_100': lambda stats, context, unlocked_count: unlocked_count >= 100,
    'puzzle_god': lambda stats, context, unlocked_count: (
        stats.level >= 100 and stats.streak >= 365 and stats.total_games >= 200
        and stats.get_win_rate() >= 95),
}

# Custom checks that depend on how many achievements are unlocked
COUNT_DEPENDENT_CHECKS = {'achievements_unlocked_75', 'achievements_unlocked_90', 'achievements_unlocked_100'}


def _check_custom(criteria, stats, context, unlocked_count):
    check = CUSTOM_CHECKS.get(criteria['check'])
    if check is None:
        logger.warning(f"Unknown custom achievement check: {criteria['check']}")
        return False
    return bool(check(stats, context, unlocked_count))


CRITERIA_CHECKS = {
    'first_puzzle': _check_first_puzzle,
    'puzzles_solved': _check_puzzles_solved,
    'puzzles_solved_no_hints': _check_puzzles_solved_no_hints,
    'perfect_solves': _check_perfect_solves,
    'streak_days': _check_streak_days,
    'max_streak': _check_max_streak,
    'speed_solve': _check_speed_solve,
    'speed_solve_count': _check_speed_solve_count,
    'total_points': _check_total_points,
    'level_reached': _check_level_reached,
    'clutch_solves': _check_clutch_solves,
    'daily_challenges': _check_daily_challenges,
    'weekly_puzzles': _check_weekly_puzzles,
    'total_attempts': _check_total_attempts,
    'win_rate': _check_win_rate,
    'difficulty_easy': _difficulty_check('easy'),
    'difficulty_medium': _difficulty_check('medium'),
    'difficulty_hard': _difficulty_check('hard'),
    'all_difficulties_in_day': _check_all_difficulties_in_day,
    'comeback': _check_comeback,
    'no_hints_streak': _check_no_hints_streak,
    'account_age_days': _check_account_age_days,
    'games_in_day': _check_games_in_day,
    'consecutive_perfect': _check_consecutive_perfect,
    'total_time_played': _check_total_time_played,
    'categories_completed': _check_categories_completed,
    'hints_used_total': _check_hints_used_total,
    'share_result': _check_share_result,
    'profile_complete': _check_profile_complete,
    'leaderboard_top': _check_leaderboard_top,
    'leaderboard_top_weekly': _check_leaderboard_top_weekly,
    'special_date': _check_special_date,
    'night_owl': _check_night_owl,
    'early_bird': _check_early_bird,
    'weekend_warrior': _check_weekend_warrior,
    'custom': _check_custom,
}


def _validate_table(definitions: list[AchievementDefinition]) -> None:
    seen = set()
    for definition in definitions:
        if definition.id in seen:
            raise ValueError(f"Duplicate achievement id: {definition.id}")
        seen.add(definition.id)
        if definition.criteria['type'] not in CRITERIA_CHECKS:
            raise ValueError(f"Achievement {definition.id} has unknown criteria type "
                             f"'{definition.criteria['type']}'")
        if definition.category not in CATEGORIES or definition.rarity not in RARITIES:
            raise ValueError(f"Achievement {definition.id} has invalid category or rarity")


_validate_table(ACHIEVEMENTS)
ACHIEVEMENTS_BY_ID = {a.id: a for a in ACHIEVEMENTS}


# ============================================================================
# Evaluation
# ============================================================================

def check_criteria(criteria: dict, stats: UserStats, context: GameContext, unlocked_count: int = 0) -> bool:
    """Evaluate one criteria dict. Unknown types never match."""
    check = CRITERIA_CHECKS.get(criteria.get('type'))
    if check is None:
        logger.warning(f"Unknown achievement criteria type: {criteria.get('type')}")
        return False
    return bool(check(criteria, stats, context, unlocked_count))


def _is_count_dependent(definition: AchievementDefinition) -> bool:
    return definition.criteria.get('type') == 'custom' and definition.criteria.get('check') in COUNT_DEPENDENT_CHECKS


def evaluate_achievements(stats: UserStats, context: GameContext,
                          definitions: list[AchievementDefinition] = ACHIEVEMENTS) -> list[AchievementDefinition]:
    """Return the definitions newly satisfied by these stats, in table order.

    Achievements already in stats.achievements are skipped. Collection
    achievements ("unlock N achievements") count the ones already held plus
    the ones unlocked by this same call, so the result does not depend on the
    order of the table. Stats are not modified.
    """
    unlocked_ids = set(stats.achievements)
    pending = [d for d in definitions if d.id not in unlocked_ids]

    newly_unlocked = {
        d.id for d in pending
        if not _is_count_dependent(d) and check_criteria(d.criteria, stats, context)
    }
    unlocked_count = len(unlocked_ids) + len(newly_unlocked)
    newly_unlocked.update(
        d.id for d in pending
        if _is_count_dependent(d) and check_criteria(d.criteria, stats, context, unlocked_count)
    )

    result = [d for d in pending if d.id in newly_unlocked]
    if result:
        logger.info(f"Unlocked {len(result)} achievement(s): {', '.join(d.id for d in result)}")
    return result


# ============================================================================
# Lookups and progress
# ============================================================================

def get_achievement_by_id(achievement_id: str) -> AchievementDefinition | None:
    return ACHIEVEMENTS_BY_ID.get(achievement_id)


def get_achievements_by_category(category: str) -> list[AchievementDefinition]:
    return [a for a in ACHIEVEMENTS if a.category == category]


def get_achievements_by_rarity(rarity: str) -> list[AchievementDefinition]:
    return [a for a in ACHIEVEMENTS if a.rarity == rarity]


def get_total_possible_points() -> int:
    return sum(a.points for a in ACHIEVEMENTS)


def get_achievement_progress(unlocked_ids: list[str]) -> dict:
    """Summary of a player's collection. Unknown ids are ignored."""
    unlocked = [ACHIEVEMENTS_BY_ID[i] for i in dict.fromkeys(unlocked_ids) if i in ACHIEVEMENTS_BY_ID]
    total = len(ACHIEVEMENTS)
    return {
        'unlocked': len(unlocked),
        'total': total,
        'percentage': round(len(unlocked) / total * 100),
        'points_earned': sum(a.points for a in unlocked),
        'total_possible_points': get_total_possible_points()
    }
