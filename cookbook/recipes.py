"""
Recipe form state and the in-memory recipe store.

RecipeDraft holds what the user has typed into the "Create Recipe" form:
free-text fields plus two growable lists (ingredients and steps). It decides
whether the form can be saved and turns itself into a Recipe.

RecipeStore is the process-wide list of saved recipes.

Note: This is a simple in-memory implementation. Recipes are lost when the
process exits and the list has no upper bound.
"""

import logging
import threading
from typing import Iterator, List, Optional

from cookbook.errors import RecipeFormError
from cookbook.models import Recipe

logger = logging.getLogger(__name__)

MIN_SERVES = 1
MAX_SERVES = 20
MAX_RATING = 5


def _is_blank(value: str) -> bool:
    return not value.strip()


def _clean(lines: List[str]) -> List[str]:
    """Trim each line and drop the blank ones, keeping order."""
    return [line.strip() for line in lines if not _is_blank(line)]


class RecipeDraft:
    """
    Editable state behind the recipe creation form.

    A fresh draft starts with one empty ingredient and one empty step, serves 1
    and has no rating.
    """

    def __init__(
        self,
        title: str = "",
        est_time: str = "",
        serves: int = MIN_SERVES,
        ingredients: Optional[List[str]] = None,
        steps: Optional[List[str]] = None,
        rating: int = 0,
    ) -> None:
        self.title = title
        self.est_time = est_time
        self.serves = serves
        self.ingredients: List[str] = list(ingredients) if ingredients else [""]
        self.steps: List[str] = list(steps) if steps else [""]
        self.rating = 0
        self.set_rating(rating)

    # Ingredients

    def add_ingredient(self, text: str = "") -> None:
        self.ingredients.append(text)

    @property
    def can_remove_ingredient(self) -> bool:
        return len(self.ingredients) > 1

    def remove_ingredient(self, index: int) -> bool:
        """
        Remove the ingredient at `index`.

        Returns:
            True if removed; False when it is the only ingredient left
        """
        if not self.can_remove_ingredient:
            return False
        del self.ingredients[index]
        return True

    # Steps

    def add_step(self, text: str = "") -> None:
        self.steps.append(text)

    @property
    def can_remove_step(self) -> bool:
        return len(self.steps) > 1

    def remove_step(self, index: int) -> bool:
        """Remove the step at `index`; False when it is the only step left."""
        if not self.can_remove_step:
            return False
        del self.steps[index]
        return True

    # Rating

    def set_rating(self, star: int) -> None:
        """
        Set the star rating.

        Raises:
            ValueError: If `star` is outside 0..5
        """
        if not 0 <= star <= MAX_RATING:
            raise ValueError(f"Rating must be between 0 and {MAX_RATING}, got {star}")
        self.rating = star

    @property
    def rating_label(self) -> str:
        return "No rating" if self.rating == 0 else f"{self.rating}/{MAX_RATING}"

    # Saving

    @property
    def can_save(self) -> bool:
        """Title, ingredients and steps must each contain something besides whitespace."""
        return (
            not _is_blank(self.title)
            and not _is_blank("".join(self.ingredients))
            and not _is_blank("".join(self.steps))
        )

    def build(self) -> Recipe:
        """
        Turn the draft into a Recipe.

        Blank ingredient and step lines are dropped; everything kept is trimmed
        and stays in its original order.

        Raises:
            RecipeFormError: If the draft cannot be saved yet
        """
        if not self.can_save:
            raise RecipeFormError("A recipe needs a title, at least one ingredient and at least one step.")
        return Recipe(
            title=self.title.strip(),
            est_time=self.est_time.strip(),
            serves=self.serves,
            ingredients=_clean(self.ingredients),
            steps=_clean(self.steps),
            rating=self.rating,
        )

    def save(self, store: Optional["RecipeStore"] = None) -> Recipe:
        """Build the recipe and append it to `store` (the shared store by default)."""
        recipe = self.build()
        (store or RecipeStore.shared()).add(recipe)
        return recipe


class RecipeStore:
    """Append-only, process-wide list of saved recipes."""

    _shared: Optional["RecipeStore"] = None
    _shared_lock = threading.Lock()

    def __init__(self) -> None:
        self._recipes: List[Recipe] = []
        self._lock = threading.Lock()

    @classmethod
    def shared(cls) -> "RecipeStore":
        """Return the process-wide store, creating it on first use."""
        with cls._shared_lock:
            if cls._shared is None:
                cls._shared = cls()
            return cls._shared

    def add(self, recipe: Recipe) -> None:
        with self._lock:
            self._recipes.append(recipe)
        logger.info("Saved recipe %r (%s)", recipe.title, recipe.id)

    def all(self) -> List[Recipe]:
        """Snapshot of all recipes in the order they were saved."""
        with self._lock:
            return list(self._recipes)

    def get(self, recipe_id: str) -> Optional[Recipe]:
        with self._lock:
            for recipe in self._recipes:
                if recipe.id == recipe_id:
                    return recipe
        return None

    def clear(self) -> None:
        """Remove all recipes (useful for testing)."""
        with self._lock:
            self._recipes.clear()

    def __len__(self) -> int:
        return len(self._recipes)

    def __iter__(self) -> Iterator[Recipe]:
        return iter(self.all())
