"""Data models for the matching engine.

This module defines the scoring weights and the score-distribution summary
returned by batch statistics.
"""

from dataclasses import asdict, dataclass
from typing import Dict, Union


@dataclass(frozen=True)
class ScoringWeights:
    """Weights and bonuses of the match score.

    Components are percentages (0-100) multiplied by their weight; bonuses
    are added after weighting and the total is clamped to [0, 100].

    Attributes:
        required_skills: Weight of required-skill coverage
        preferred_skills: Weight of preferred-skill coverage
        experience: Weight of the experience component
        experience_bonus_per_year: Bonus per year above the requirement
        experience_bonus_cap: Maximum experience bonus
        perfect_skills_bonus: Bonus when every required skill is present
    """

    required_skills: float = 0.6
    preferred_skills: float = 0.2
    experience: float = 0.2
    experience_bonus_per_year: float = 2.0
    experience_bonus_cap: float = 10.0
    perfect_skills_bonus: float = 5.0


DEFAULT_WEIGHTS = ScoringWeights()


@dataclass
class MatchingStats:
    """Score distribution of candidates against one job posting.

    Bands: excellent >= 90, good 70-89, fair 50-69, poor < 50. Average,
    highest and lowest are 0 when there are no candidates.
    """

    total: int = 0
    excellent: int = 0
    good: int = 0
    fair: int = 0
    poor: int = 0
    average: float = 0.0
    highest: float = 0.0
    lowest: float = 0.0

    def as_dict(self) -> Dict[str, Union[int, float]]:
        return asdict(self)

    def __str__(self) -> str:
        return (
            f"Total Candidates: {self.total}\n"
            f"Excellent Matches (90-100%): {self.excellent}\n"
            f"Good Matches (70-89%): {self.good}\n"
            f"Fair Matches (50-69%): {self.fair}\n"
            f"Poor Matches (0-49%): {self.poor}\n"
            f"Average Score: {self.average:.1f}%\n"
            f"Highest Score: {self.highest:.1f}%\n"
            f"Lowest Score: {self.lowest:.1f}%"
        )
