from typing import Dict, Iterator, Mapping, Tuple, Union

from pydantic import BaseModel, Field, field_validator

from constants import FEDERAL_TAX_BRACKETS_2024


class TaxBracketTable(BaseModel):
    """
    Marginal tax brackets as an ordered list of ``(rate, threshold)`` pairs.

    A rate applies to income strictly above its threshold. Rates ascend and
    thresholds strictly increase with them; the first bracket is always
    ``0.0 -> 0``.
    """

    brackets: Tuple[Tuple[float, float], ...] = Field(..., min_length=1)

    model_config = {"frozen": True}

    @field_validator("brackets")
    @classmethod
    def check_brackets(
        cls, v: Tuple[Tuple[float, float], ...]
    ) -> Tuple[Tuple[float, float], ...]:
        first_rate, first_threshold = v[0]
        if first_rate != 0.0 or first_threshold != 0:
            raise ValueError(
                f"First bracket must be 0.0 -> 0, got {first_rate} -> {first_threshold}"
            )
        for (prev_rate, prev_threshold), (rate, threshold) in zip(v, v[1:]):
            if rate <= prev_rate:
                raise ValueError(f"Rates must ascend: {rate} follows {prev_rate}")
            if threshold <= prev_threshold:
                raise ValueError(
                    f"Threshold for rate {rate} ({threshold:,.0f}) must exceed "
                    f"the threshold for rate {prev_rate} ({prev_threshold:,.0f})"
                )
        for rate, _ in v:
            if not 0.0 <= rate < 1.0:
                raise ValueError(f"Rate {rate} outside [0, 1)")
        return v

    @classmethod
    def from_mapping(
        cls, mapping: Mapping[Union[str, float], float]
    ) -> "TaxBracketTable":
        """Builds a table from ``{rate: threshold}``; JSON string keys are accepted."""
        pairs = sorted((float(rate), float(threshold)) for rate, threshold in mapping.items())
        return cls(brackets=tuple(pairs))

    @property
    def rates(self) -> Tuple[float, ...]:
        return tuple(rate for rate, _ in self.brackets)

    def threshold_for(self, rate: float) -> float:
        for bracket_rate, threshold in self.brackets:
            if bracket_rate == rate:
                return threshold
        raise KeyError(rate)

    def as_dict(self) -> Dict[float, float]:
        return dict(self.brackets)

    def __len__(self) -> int:
        return len(self.brackets)

    def __iter__(self) -> Iterator[Tuple[float, float]]:  # type: ignore[override]
        return iter(self.brackets)


DEFAULT_TAX_BRACKETS = TaxBracketTable.from_mapping(FEDERAL_TAX_BRACKETS_2024)


def get_bracket(
    table: TaxBracketTable, extra_amount: float, base_income: float
) -> Tuple[float, TaxBracketTable]:
    """
    Finds the marginal rate for ``base_income + extra_amount``.

    Scans from the highest rate down and picks the first whose threshold is
    strictly below the income, so an income equal to a threshold lands in
    the bracket beneath it. Returns the rate (0.0 when nothing matches) and
    a narrowed table holding only the brackets that were scanned.
    """
    income = base_income + extra_amount
    scanned = []
    selected_rate = 0.0

    for rate, threshold in reversed(table.brackets):
        scanned.append((rate, threshold))
        if income > threshold:
            selected_rate = rate
            break

    narrowed = TaxBracketTable.model_construct(brackets=tuple(reversed(scanned)))
    return selected_rate, narrowed
