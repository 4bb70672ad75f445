"""Service module exports."""

from . import (
    amortization,
    dates,
    export_csv,
    fundings,
    import_csv,
    interest,
    payments,
    scenario,
    strategies,
    timeline,
)

__all__ = [
    "amortization",
    "dates",
    "export_csv",
    "fundings",
    "import_csv",
    "interest",
    "payments",
    "scenario",
    "strategies",
    "timeline",
]
