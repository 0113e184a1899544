"""
Global configuration for the volatility-shift pricing model.

Keeps all domain constants in one place. Override per model instance
via constructor args, via CLI args in main.py, or by editing this file
directly for persistent changes.
"""

from datetime import time
from decimal import Decimal


# ── model identity ───────────────────────────────────────────────────────
MODEL_NAME = "Sample"


# ── expiration convention ────────────────────────────────────────────────
# FORTS evening session close: options expire at 18:45 exchange time
# on their expiration date
EXPIRATION_CUTOFF = time(hour=18, minute=45)
DAYS_PER_YEAR = 365.25          # ACT/365.25 year fractions


# ── market parameters ────────────────────────────────────────────────────
# no rate input exists in OptionEvaluationParams yet, so every
# evaluation runs with a zero rate until one is added
RISK_FREE_RATE = 0.0


# ── volatility shift defaults ────────────────────────────────────────────
DEFAULT_VOLA_SHIFT = Decimal("0")       # applied model shift at construction
DEFAULT_REQUEST_VOLA_SHIFT = 0.0        # per-request shift when caller omits it
