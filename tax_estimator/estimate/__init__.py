"""Tax estimation: input/output records, server computation and client."""

from tax_estimator.estimate.client import EstimateClient
from tax_estimator.estimate.models import TaxInfo, TaxResults
from tax_estimator.estimate.server import calculate_state_tax, calculate_taxes, estimate

__all__ = [
    "EstimateClient",
    "TaxInfo",
    "TaxResults",
    "calculate_state_tax",
    "calculate_taxes",
    "estimate",
]
