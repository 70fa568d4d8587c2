"""
Question Selection Logic - pure functions.

Prefers questions the user has not answered yet, and tops up from
already-answered ones so a player who exhausted a level is never blocked.
"""
import random
from typing import Iterable, List, Optional, Set


class NotEnoughQuestions(Exception):
    """The catalog cannot fill the requested count."""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(f'Requested {requested} questions, only {available} available')


def select_question_ids(
    catalog_ids: Iterable[int],
    answered_ids: Set[int],
    count: int,
    rng: Optional[random.Random] = None,
) -> List[int]:
    """
    Pick ``count`` distinct question ids from a level's active catalog.

    Args:
        catalog_ids: Active question ids for the level.
        answered_ids: Ids this user already answered at this level.
        count: Number of questions to serve.
        rng: Random source (injectable for tests).

    Returns:
        List of ``count`` unique ids, unanswered ones first.

    Raises:
        NotEnoughQuestions: when the catalog holds fewer than ``count`` ids.
        ValueError: when ``count`` is not positive.
    """
    if count < 1:
        raise ValueError('count must be positive')

    rng = rng or random.Random()

    # dict.fromkeys keeps catalog order and drops duplicates
    catalog = list(dict.fromkeys(catalog_ids))
    if len(catalog) < count:
        raise NotEnoughQuestions(count, len(catalog))

    fresh = [qid for qid in catalog if qid not in answered_ids]
    seen = [qid for qid in catalog if qid in answered_ids]

    if len(fresh) >= count:
        return rng.sample(fresh, count)

    rng.shuffle(fresh)
    top_up = rng.sample(seen, count - len(fresh))
    return fresh + top_up
