import os
import json
from typing import Any, Dict, Mapping, Optional
from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)
from loguru import logger

from constants import (
    DEFAULT_RETIREMENT_AGE,
    MAX_CURRENT_AGE,
    MAX_INVEST_PERCENT,
    MAX_RETIREMENT_AGE,
    MAX_STOCK_GROWTH_PERCENT,
    MIN_CURRENT_AGE,
    MIN_INVEST_PERCENT,
    MIN_RETIREMENT_AGE,
    MIN_STOCK_GROWTH_PERCENT,
    OPTIMISTIC_GROWTH_PERCENT,
)
from tax_brackets import DEFAULT_TAX_BRACKETS, TaxBracketTable


class ConfigurationError(Exception):
    """Raised when the configuration file cannot be loaded or parsed."""


class InvalidInputError(ValueError):
    """Raised when projection inputs are missing, out of domain or inconsistent."""


# Inputs the user has to type in before a projection makes sense.
REQUIRED_INPUT_FIELDS = (
    "current_age",
    "annual_income",
    "invest_percent",
    "stock_growth_percent",
)


class SimulationInput(BaseModel):
    """Scalar inputs for a single retirement projection."""

    current_age: int = Field(..., ge=MIN_CURRENT_AGE, le=MAX_CURRENT_AGE)
    retirement_age: int = Field(
        DEFAULT_RETIREMENT_AGE, ge=MIN_RETIREMENT_AGE, le=MAX_RETIREMENT_AGE
    )
    annual_income: float = Field(..., gt=0, description="Yearly income in currency units.")
    invest_percent: float = Field(
        ...,
        ge=MIN_INVEST_PERCENT,
        le=MAX_INVEST_PERCENT,
        description="Percent of the annual income contributed every year.",
    )
    stock_growth_percent: float = Field(
        ...,
        ge=MIN_STOCK_GROWTH_PERCENT,
        le=MAX_STOCK_GROWTH_PERCENT,
        description="Nominal growth applied once per year.",
    )
    taxed_at_contribution: bool = Field(
        True,
        alias="roth",
        description=(
            "If True (Roth-style), each contribution is taxed before it is invested "
            "and nothing is taxed at withdrawal. If False, contributions go in pre-tax "
            "and the final balance is taxed once in the retirement year."
        ),
    )

    model_config = {"validate_by_name": True, "frozen": True, "allow_inf_nan": False}

    @model_validator(mode="after")
    def check_horizon(self) -> "SimulationInput":
        if self.current_age >= self.retirement_age:
            raise ValueError(
                f"Current age ({self.current_age}) must be below the retirement age "
                f"({self.retirement_age})."
            )
        return self

    @property
    def years_to_retirement(self) -> int:
        return self.retirement_age - self.current_age

    @property
    def annual_contribution(self) -> float:
        return self.annual_income * (self.invest_percent / 100)

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "SimulationInput":
        """Validates ``params`` and raises ``InvalidInputError`` on any problem."""
        try:
            return cls(**params)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc']) or 'input'}: {err['msg']}"
                for err in e.errors()
            )
            raise InvalidInputError(f"Invalid projection input: {problems}") from e


def has_required_inputs(params: Mapping[str, Any]) -> bool:
    """
    True when every user-entered value is present and non-zero.

    Absent input is a "fill in the information" state for the caller to
    render, distinct from invalid input.
    """
    return all(params.get(name) for name in REQUIRED_INPUT_FIELDS)


class ScenarioConfig(BaseModel):
    """A projection scenario as stored in a JSON configuration file."""

    Nickname: str = Field(
        "DefaultScenario",
        alias="scenario",
        description="A nickname for this projection scenario.",
    )
    current_age: int
    retirement_age: int = DEFAULT_RETIREMENT_AGE
    annual_income: float
    invest_percent: float
    stock_growth_percent: float
    taxed_at_contribution: bool = Field(True, alias="roth")
    start_year: Optional[int] = Field(
        None, description="Calendar year of year offset 0. Defaults to the current year."
    )
    tax_brackets: Optional[Dict[float, float]] = Field(
        None, description="Rate -> threshold mapping replacing the default brackets."
    )
    plot: bool = Field(True)
    output_dir: str = Field(".")

    model_config = {
        "validate_by_name": True,
        "validate_assignment": True,
        "allow_inf_nan": False,
    }

    @field_validator("stock_growth_percent")
    @classmethod
    def check_stock_growth(cls, v: float, info: ValidationInfo) -> float:
        if v > OPTIMISTIC_GROWTH_PERCENT:
            scen_name = info.data.get("Nickname", "N/A")
            logger.warning(
                f"Expected stock growth ({v:.1f}%) is unusually optimistic for scenario '{scen_name}'."
            )
        return v

    @field_validator("tax_brackets")
    @classmethod
    def check_tax_brackets(cls, v: Optional[Dict[float, float]]) -> Optional[Dict[float, float]]:
        if v is not None:
            try:
                TaxBracketTable.from_mapping(v)
            except ValidationError as e:
                raise ValueError(f"Invalid tax brackets: {e.errors()[0]['msg']}") from e
        return v

    def simulation_input(self) -> SimulationInput:
        return SimulationInput.from_params(
            {
                "current_age": self.current_age,
                "retirement_age": self.retirement_age,
                "annual_income": self.annual_income,
                "invest_percent": self.invest_percent,
                "stock_growth_percent": self.stock_growth_percent,
                "taxed_at_contribution": self.taxed_at_contribution,
            }
        )

    def tax_table(self) -> TaxBracketTable:
        if self.tax_brackets is None:
            return DEFAULT_TAX_BRACKETS
        return TaxBracketTable.from_mapping(self.tax_brackets)


def load_config_from_json(file_path: str) -> Dict[str, Any]:
    """Loads and returns the configuration dictionary from a JSON file."""
    if not os.path.exists(file_path):
        raise ConfigurationError(f"Configuration file not found at: {file_path}")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Error parsing JSON file '{file_path}': {e}"
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Unexpected error reading config file '{file_path}': {e}"
        ) from e
