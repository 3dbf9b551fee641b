# constants.py

COMPOUNDING_PERIODS_PER_YEAR: int = 1
DEFAULT_RETIREMENT_AGE: int = 65

MIN_CURRENT_AGE: int = 1
MAX_CURRENT_AGE: int = 94
MIN_RETIREMENT_AGE: int = 20
MAX_RETIREMENT_AGE: int = 95
MIN_INVEST_PERCENT: float = 1.0
MAX_INVEST_PERCENT: float = 100.0
MIN_STOCK_GROWTH_PERCENT: float = 1.0
MAX_STOCK_GROWTH_PERCENT: float = 80.0
OPTIMISTIC_GROWTH_PERCENT: float = 20.0

# U.S. federal brackets, single filer, 2024 (rate -> income threshold)
FEDERAL_TAX_BRACKETS_2024 = {
    0.0: 0,
    0.10: 11_600,
    0.12: 23_200,
    0.22: 47_151,
    0.24: 100_571,
    0.32: 191_951,
    0.35: 243_725,
    0.37: 609_351,
}

DEFAULT_CONFIG_FILENAME: str = "config.json"

# Plotting constants
BALANCE_LINE_COLOR = '#c1514a'
BALANCE_AREA_COLOR = '#F1655C'
TAX_LINE_COLOR = '#1f77b4'
TEXT_OUTPUT_COLOR = '#ff7f0e'
