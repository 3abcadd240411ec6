"""
Cooking statuses shown as tiles on the home screen.

Each status has a fixed description and a destination screen:
- "New recipe" opens the recipe creation form
- "Shopping" opens the nearby grocery store map
- "Cooking" and "Eating" open a static description panel
"""

from enum import Enum
from typing import Dict, List


class Screen(str, Enum):
    """Detail screens a status tile can navigate to."""
    CREATE_RECIPE = "create_recipe"
    MAP = "map"
    DETAIL = "detail"


class Status(str, Enum):
    PROGRESS = "New recipe"
    SHOPPING = "Shopping"
    COOKING = "Cooking"
    EATING = "Eating"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def destination(self) -> Screen:
        if self is Status.SHOPPING:
            return Screen.MAP
        if self is Status.PROGRESS:
            return Screen.CREATE_RECIPE
        return Screen.DETAIL

    @property
    def id(self) -> str:
        return self.value


_DESCRIPTIONS: Dict[Status, str] = {
    Status.PROGRESS: "You're starting a new recipe!",
    Status.SHOPPING: "You're shopping for ingredients!",
    Status.COOKING: "You're cooking your recipe!",
    Status.EATING: "Enjoy the meal and note improvements for next time!",
}


def all_statuses() -> List[Status]:
    """All statuses in tile order."""
    return list(Status)
