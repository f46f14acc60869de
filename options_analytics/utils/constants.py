"""
Numerical constants and defaults for the options analytics engine.

This module is the engine's configuration surface. Every operation takes
its parameters explicitly and only falls back to these values as keyword
defaults; nothing here is mutated at runtime.
"""

# Market defaults
DEFAULT_RISK_FREE_RATE = 0.05  # 5% annualized, continuous
DAYS_PER_YEAR = 365.0  # Calendar-day convention for theta and time-to-expiry

# Position conventions
CONTRACT_MULTIPLIER = 100  # Shares per option contract

# Abramowitz & Stegun 7.1.26 coefficients for erf, used by the normal CDF
AS_P = 0.3275911
AS_A1 = 0.254829592
AS_A2 = -0.284496736
AS_A3 = 1.421413741
AS_A4 = -1.453152027
AS_A5 = 1.061405429

# Normal distribution bounds
MAX_STANDARD_DEVIATIONS = 8.0  # Beyond ±8σ, CDF is effectively 0 or 1

# Implied volatility solver parameters
IV_INITIAL_GUESS = 0.2  # Newton-Raphson starting point (20% vol)
IV_MAX_ITERATIONS = 100  # Maximum Newton-Raphson iterations
IV_PRICE_TOLERANCE = 1e-4  # $0.0001 price accuracy
IV_MIN_VOL = 0.01  # 1% floor applied when an update goes non-positive
IV_MAX_VOL = 5.0  # 500% ceiling
IV_DECIMALS = 4  # Reported implied volatility precision

# Presentation rounding for Greeks
PRICE_DECIMALS = 2
DELTA_DECIMALS = 3
GAMMA_DECIMALS = 4
THETA_DECIMALS = 2
VEGA_DECIMALS = 2
RHO_DECIMALS = 2

# Payoff grids
PL_DECIMALS = 2
CURVE_RANGE_PERCENT = 0.2  # ±20% around the centre price
CURVE_STEPS = 50
ANALYSIS_RANGE_PERCENT = 0.3  # Strategy analysis scans a wider ±30%
ANALYSIS_STEPS = 100

# Strategy metrics marker for an extreme that was never bounded by the grid
UNBOUNDED = "unbounded"
