from __future__ import annotations
from typing import Dict, Tuple, Union

from ..models.errors import InvalidInputError
from ..models.recommendation import Recommendation
from ..models.undertone import Undertone
from ..repositories.recommendation_repository import RecommendationRepository


class RecommendationService:
    """
    Looks up the palette for an undertone. No computation, static data only.
    """
    def __init__(self, recommendation_repository: RecommendationRepository | None = None):
        self.recommendation_repository = recommendation_repository or RecommendationRepository()

    @staticmethod
    def parse_undertone(value: Union[Undertone, str]) -> Undertone:
        """Accept an Undertone or its (case-insensitive) name."""
        if isinstance(value, Undertone):
            return value
        try:
            return Undertone(str(value).strip().lower())
        except ValueError as err:
            valid = ", ".join(u.value for u in Undertone)
            raise InvalidInputError(f"Unknown undertone {value!r}; expected one of: {valid}") from err

    def get_recommendation(self, undertone: Union[Undertone, str]) -> Recommendation:
        return self.recommendation_repository.retrieve(self.parse_undertone(undertone))

    def get_all(self) -> Dict[Undertone, Recommendation]:
        return self.recommendation_repository.retrieve_all()

    def get_tips(self) -> Tuple[str, ...]:
        return self.recommendation_repository.retrieve_tips()
