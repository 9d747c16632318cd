"""Game engines for each room type, plus their timers, scoring and words.

Engines only touch their room's game data and talk to clients through the
session's broadcaster; socket handlers never reach in here directly.
"""

from partyhost.models import GameType
from .grid import GridGameEngine, check_winner, DRAW
from .scribble import ScribbleEngine
from .strategy import StrategyGameRelay


ENGINES = {
    GameType.SCRIBBLE: ScribbleEngine,
    GameType.GRID: GridGameEngine,
    GameType.STRATEGY: StrategyGameRelay,
}
