from typing import Any, Dict, List, Optional, Sequence

from partyhost.models import User


GUESSER_POINTS = 100
DRAWER_POINTS = 25
LEADERBOARD_SIZE = 5


def award_correct_guess(guesser: User, drawer: Optional[User]) -> None:
    """Apply scoring for one correct guess.

    +100 to the guesser; +25 to the drawer, if the drawer is still in the room.
    """
    guesser.score += GUESSER_POINTS
    if drawer is not None:
        drawer.score += DRAWER_POINTS


def reset_scores(users: Sequence[User]) -> None:
    for user in users:
        user.score = 0


def leaderboard(users: Sequence[User], limit: int = LEADERBOARD_SIZE) -> List[Dict[str, Any]]:
    # sorted() is stable, so equal scores keep membership order
    ranked = sorted(users, key=lambda u: u.score, reverse=True)
    return [u.to_dict() for u in ranked[:limit]]
