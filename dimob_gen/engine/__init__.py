"""Declaration engine: eligibility, adjustment, aggregation and validation."""

from dimob_gen.engine.adjustment import adjust, round2
from dimob_gen.engine.aggregator import AggregationOutcome, FiscalAggregator, allocate_pro_rata
from dimob_gen.engine.eligibility import filter_eligible, fiscal_year_bounds, is_eligible
from dimob_gen.engine.validator import DeclarationValidator, ValidationReport

__all__ = [
    "AggregationOutcome",
    "DeclarationValidator",
    "FiscalAggregator",
    "ValidationReport",
    "adjust",
    "allocate_pro_rata",
    "filter_eligible",
    "fiscal_year_bounds",
    "is_eligible",
    "round2",
]
