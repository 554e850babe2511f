"""
config.py -- Calculator settings using Pydantic Settings.

Statutory rates and loop caps live here as named constants; every one of
them can be overridden through a FINCALC_* environment variable or a .env
file, e.g. FINCALC_PPF_RATE=0.075.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

# Statutory rates (decimal)
PPF_RATE = 0.071
EPF_RATE = 0.085
CESS_RATE = 0.04

# Standard deductions (INR)
NEW_REGIME_STANDARD_DEDUCTION = 75_000.0
OLD_REGIME_STANDARD_DEDUCTION = 50_000.0
SALARY_STANDARD_DEDUCTION = 50_000.0
EQUITY_LTCG_EXEMPTION = 100_000.0

# Loop caps
MAX_MONTHS = 1200              # 100 years of monthly periods
MAX_YEARS = 100
SWP_MAX_MONTHS = 600           # 50 years
MAX_COMPOUNDING_PERIODS = 1000

# Clamp bound for safe arithmetic
MAX_SAFE_VALUE = 1e15


class Settings(BaseSettings):
    """Calculator settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FINCALC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    ppf_rate: float = PPF_RATE
    epf_rate: float = EPF_RATE
    cess_rate: float = CESS_RATE

    new_regime_standard_deduction: float = NEW_REGIME_STANDARD_DEDUCTION
    old_regime_standard_deduction: float = OLD_REGIME_STANDARD_DEDUCTION
    salary_standard_deduction: float = SALARY_STANDARD_DEDUCTION
    equity_ltcg_exemption: float = EQUITY_LTCG_EXEMPTION

    max_months: int = MAX_MONTHS
    max_years: int = MAX_YEARS
    swp_max_months: int = SWP_MAX_MONTHS
    max_compounding_periods: int = MAX_COMPOUNDING_PERIODS

    max_safe_value: float = MAX_SAFE_VALUE


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
