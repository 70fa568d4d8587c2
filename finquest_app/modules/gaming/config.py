# File: finquest_app/modules/gaming/config.py


class GamingDefaultConfig:
    """
    Default configuration for the Gaming module.
    Acts as a fallback when the Flask app config does not override a key.
    """

    # --- Sessions ---
    QUESTIONS_PER_SESSION = 4
    OPTIONS_PER_QUESTION = 3

    # --- Map layout ---
    MAX_LEVELS_PER_MAP = 4
    MAX_MAPS = 4

    # --- Scoring ---
    PASSING_SCORE = 2              # half of QUESTIONS_PER_SESSION
    XP_PER_CORRECT_ANSWER = 25
    PERFECT_SCORE_BONUS = 150        # 4*25 + 150 + 100 == 350 for a perfect first pass
    LEVEL_COMPLETION_BONUS = 100

    # --- Achievements ---
    ACHIEVEMENT_XP_MILESTONE = 1000
    ACHIEVEMENT_STREAK_DAYS = 7


MAP_TOPICS = {
    1: 'Basic budgeting, savings, emergency funds, basic investing concepts',
    2: 'Credit scores, debt management, retirement planning, advanced investing',
    3: 'Real estate, insurance, tax planning, estate planning',
    4: 'Advanced investments, business finance, wealth management',
}

DEFAULT_MAP_TOPIC = 'General financial literacy'


def difficulty_for_level(level: int) -> str:
    """Difficulty tag used for catalog entries of a level."""
    if level <= 1:
        return 'easy'
    if level <= 2:
        return 'medium'
    return 'hard'
