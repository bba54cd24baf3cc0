"""Abstract repository interfaces for the storage layer."""

from abc import ABC, abstractmethod

from models import ExerciseResponse, ExerciseTemplate


class ExerciseRepository(ABC):
    """Abstract interface for exercise template storage."""

    @abstractmethod
    def get_all(self) -> list[ExerciseTemplate]:
        """Load all exercise templates.

        Returns:
            List of all exercises, ordered by category then title.
        """
        pass

    @abstractmethod
    def get_by_id(self, exercise_id: str) -> ExerciseTemplate | None:
        """Load a single exercise by ID.

        Args:
            exercise_id: The exercise ID.

        Returns:
            The exercise, or None if not found.
        """
        pass

    @abstractmethod
    def get_by_category(self, category: str) -> list[ExerciseTemplate]:
        """Load exercises in a category.

        Args:
            category: The category name.

        Returns:
            List of exercises in that category.
        """
        pass

    @abstractmethod
    def save(self, template: ExerciseTemplate) -> ExerciseTemplate:
        """Validate and save/update an exercise.

        Args:
            template: The exercise to save.

        Returns:
            The exercise as stored, with requirements normalized.

        Raises:
            ValueError: If the exercise requirements are invalid.
        """
        pass

    @abstractmethod
    def delete(self, exercise_id: str) -> bool:
        """Delete an exercise and its responses.

        Returns:
            True if an exercise was deleted.
        """
        pass


class ResponseRepository(ABC):
    """Abstract interface for exercise response storage."""

    @abstractmethod
    def get(self, exercise_id: str, user_id: str) -> ExerciseResponse | None:
        """Load the response of one user to one exercise."""
        pass

    @abstractmethod
    def get_for_user(self, user_id: str) -> dict[str, ExerciseResponse]:
        """Load every response of a user.

        Returns:
            Responses keyed by exercise ID.
        """
        pass

    @abstractmethod
    def save(self, response: ExerciseResponse) -> None:
        """Save/update a response."""
        pass
