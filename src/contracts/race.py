from typing import List, Optional

from pydantic import BaseModel, Field

from contracts.probe import ProbeOutcome


def rank_outcomes(outcomes):
    """
    Order outcomes with every success ahead of every failure, each group by
    ascending elapsed time. The sort is stable, so equal keys keep the order
    they were collected in.
    """
    return sorted(outcomes, key=lambda o: (not o.succeeded, o.elapsed_ms))


class RaceResult(BaseModel):
    """
    Aggregate result of one race across all configured endpoints.
    """

    fastest: Optional[ProbeOutcome] = None
    all_outcomes: List[ProbeOutcome] = Field(default_factory=list)
    completed_count: int = 0
    total_count: int = 0

    @property
    def successful(self) -> List[ProbeOutcome]:
        return [o for o in self.all_outcomes if o.succeeded]

    @property
    def best(self) -> Optional[ProbeOutcome]:
        """Lowest-latency success in rank order, which may differ from fastest."""
        successful = self.successful
        return successful[0] if successful else None
