"""
volshift
========
Black-Scholes option pricing model with a user-adjustable constant
volatility shift.

Modules:
    model           - SampleModel: pricing, greeks, staged shift settings
    resolver        - Completion of partially specified evaluation requests
    evaluation      - Request / result value objects
    instruments     - Instrument types and provider contracts
    data_feed       - Static and table-backed data providers
    params_control  - Data-binding surface for the model settings
    black_scholes   - Pricing formulas, greeks, year fractions
    config          - Global constants and defaults
"""

__version__ = "0.1.0"
