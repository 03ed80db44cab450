"""
Displacement matrix: IDP counts by state of displacement and state of origin.

Each row is keyed by the state people were displaced to and maps states of
origin to head counts. The row keyed "Total" holds the outbound total per
origin and decides which origins are active.
"""

from typing import Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

TOTAL_ROW = "Total"


class DisplacementRow(BaseModel):
    """Counts of IDPs hosted in one state, by state of origin."""

    model_config = ConfigDict(extra="ignore")

    state_of_displacement: str = Field(description="Host state, or 'Total' for origin totals")
    by_state_of_origin: Dict[str, Optional[NonNegativeInt]] = Field(
        default_factory=dict, description="Origin state -> displaced count"
    )

    def count(self, origin: str) -> int:
        return self.by_state_of_origin.get(origin) or 0


class DisplacementData(BaseModel):
    """Raw displacement payload as published."""

    model_config = ConfigDict(extra="ignore")

    data: List[DisplacementRow] = Field(default_factory=list)


class DisplacementMatrix:
    """Read-only view over the displacement rows."""

    def __init__(self, rows: List[DisplacementRow]):
        self.rows = rows

    @classmethod
    def from_dict(cls, payload: dict) -> "DisplacementMatrix":
        """Validate a decoded JSON payload (``{"data": [...]}``)."""
        return cls(DisplacementData.model_validate(payload).data)

    @property
    def totals_row(self) -> Optional[DisplacementRow]:
        for row in self.rows:
            if row.state_of_displacement == TOTAL_ROW:
                return row
        return None

    @property
    def destination_rows(self) -> List[DisplacementRow]:
        return [row for row in self.rows if row.state_of_displacement != TOTAL_ROW]

    def origin_totals(self) -> Dict[str, int]:
        """Outbound totals per origin; empty when the totals row is missing."""
        totals = self.totals_row
        if totals is None:
            return {}
        return {origin: count or 0 for origin, count in totals.by_state_of_origin.items()}

    def count(self, origin: str, destination: str) -> int:
        for row in self.destination_rows:
            if row.state_of_displacement == destination:
                return row.count(origin)
        return 0

    def flows(self) -> Iterator[Tuple[str, str, int]]:
        """
        Yield (origin, destination, count) for every non-zero flow.

        Origins come from the totals row in its order and only those with a
        positive total are considered; destinations follow row order.
        """
        destinations = self.destination_rows
        for origin, total in self.origin_totals().items():
            if total <= 0:
                continue
            for row in destinations:
                count = row.count(origin)
                if count > 0:
                    yield origin, row.state_of_displacement, count

    def __len__(self) -> int:
        return len(self.rows)
