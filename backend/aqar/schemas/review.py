from dataclasses import dataclass, field


@dataclass(frozen=True)
class ReviewCreate:
    rating: int
    comment: str = ""


@dataclass(frozen=True)
class ReviewStats:
    average_rating: float = 0
    total_reviews: int = 0
    # always holds keys 1..5
    rating_distribution: dict[int, int] = field(
        default_factory=lambda: {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
    )
