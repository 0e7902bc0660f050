# quizreco/domain/errors.py


class RecommendationError(Exception):
    """Base class for errors surfaced by the recommendation domain."""


class CatalogExhaustedError(RecommendationError):
    """No usable candidate came back from any query, in any budget band."""

    def __init__(self, family: str, queries_tried: int = 0):
        self.family = family
        self.queries_tried = queries_tried
        super().__init__(f"no usable catalog products for family={family} after {queries_tried} queries")


class UnknownProductFamilyError(RecommendationError):
    def __init__(self, family: str):
        self.family = family
        super().__init__(f"unknown product family: {family!r}")


class ChargeServiceError(Exception):
    """Charge provider missing, misconfigured, or answered with an error."""


class LeadSinkError(Exception):
    """Lead webhook missing or answered with an error."""
