"""One-shot declaration pipeline per owner.

Stages run strictly in order::

    IDLE -> FILTERING -> ADJUSTING -> AGGREGATING -> VALIDATING
         -> ENCODING -> ASSEMBLING -> COMPLETED
                                   | REJECTED | EMPTY | CANCELLED

Each run builds its own aggregator, validator and assembler, so runs for
different owners never share intermediate state and may execute on
separate threads.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date

from dimob_gen.config import DimobGenConfig
from dimob_gen.encoding import FileAssembler
from dimob_gen.engine import DeclarationValidator, FiscalAggregator, filter_eligible, fiscal_year_bounds
from dimob_gen.exceptions import ConfigurationError, GenerationCancelledError
from dimob_gen.layout import LayoutVersion, get_layout
from dimob_gen.logging import RunLogAdapter
from dimob_gen.models import (
    DEFAULT_POLICY,
    DeclarationResult,
    FinancialPolicy,
    GenerationWarning,
    PipelineStage,
    ResultStatus,
    WarningCode,
)
from dimob_gen.providers.base import DataProvider

logger = logging.getLogger(__name__)


class DeclarationPipeline:
    """Generate declaration files from a data provider.

    Parameters
    ----------
    provider : DataProvider
        Read-only source of snapshots.
    company_id : str
        Declarant company whose profile and policy are used.
    layout : LayoutVersion | None
        File layout; defaults to the current registered version.
    reference_date : date | None
        Date open payments are adjusted to. Defaults to today; only the
        projected bucket depends on it.
    encode_projected : bool
        Write the projected amount into the TransactionDetail record
        instead of zeros.
    max_workers : int
        Thread count used by ``generate_batch``.
    """

    def __init__(
        self,
        provider: DataProvider,
        company_id: str,
        layout: LayoutVersion | None = None,
        reference_date: date | None = None,
        encode_projected: bool = False,
        max_workers: int = 4,
    ) -> None:
        if not company_id:
            raise ConfigurationError("A declarant company id is required")
        if max_workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1, got {max_workers}")
        self.provider = provider
        self.company_id = company_id
        self.layout = layout or get_layout()
        self.reference_date = reference_date or date.today()
        self.encode_projected = encode_projected
        self.max_workers = max_workers

    @classmethod
    def from_config(
        cls,
        provider: DataProvider,
        config: DimobGenConfig,
        reference_date: date | None = None,
    ) -> DeclarationPipeline:
        """Build a pipeline from application configuration."""
        settings = config.declaration
        if not settings.company_id:
            raise ConfigurationError("DIMOB_COMPANY_ID is not set")
        return cls(
            provider,
            settings.company_id,
            layout=get_layout(settings.layout_version),
            reference_date=reference_date,
            encode_projected=settings.encode_projected,
            max_workers=settings.max_workers,
        )

    def generate(
        self,
        owner_id: str,
        year: int,
        cancel_event: threading.Event | None = None,
    ) -> DeclarationResult:
        """Run the pipeline for one owner and fiscal year.

        Data problems never raise: they yield a ``REJECTED`` result carrying
        every violation. Provider failures and encoding invariant violations
        propagate.

        Returns
        -------
        DeclarationResult
            ``GENERATED`` with a payload, or ``REJECTED``, ``EMPTY`` or
            ``CANCELLED`` without one.
        """
        result = DeclarationResult(
            owner_id=owner_id,
            fiscal_year=year,
            status=ResultStatus.CANCELLED,
            stage=PipelineStage.IDLE,
            reference_date=self.reference_date,
        )
        try:
            self._run(result, cancel_event)
        except GenerationCancelledError:
            logger.info("Generation for owner %s cancelled at %s", owner_id, result.stage.value)
            result.status = ResultStatus.CANCELLED
            result.stage = PipelineStage.CANCELLED
            result.payload = None
            result.record_counts = {}
        return result

    def _run(self, result: DeclarationResult, cancel_event: threading.Event | None) -> None:
        owner_id, year = result.owner_id, result.fiscal_year
        log = RunLogAdapter(logger, owner_id, year)
        start, end = fiscal_year_bounds(year)

        self._enter(result, PipelineStage.FILTERING, cancel_event)
        contracts = self.provider.get_eligible_contracts(owner_id, year)
        payments = {c.contract_id: self.provider.get_payments(c.contract_id, start, end) for c in contracts}
        eligible = filter_eligible(contracts, payments, year)
        if not eligible:
            log.info("Nothing to declare")
            result.status = ResultStatus.EMPTY
            result.stage = PipelineStage.EMPTY
            return

        self._enter(result, PipelineStage.ADJUSTING, cancel_event)
        policy = self._resolve_policy(result)
        declarant = self.provider.get_declarant_profile(self.company_id)
        owner = self.provider.get_owner_profile(owner_id)
        result.owner = owner
        tenants = {c.tenant_id: self.provider.get_tenant(c.tenant_id) for c in eligible}
        properties = {c.property_id: self.provider.get_property(c.property_id) for c in eligible}
        commissions = self.provider.get_commissions(owner_id, year)
        deductions = self.provider.get_deductions(owner_id, year)

        self._enter(result, PipelineStage.AGGREGATING, cancel_event)
        outcome = FiscalAggregator(policy, self.reference_date).aggregate(
            owner_id, year, eligible, payments, tenants, properties, commissions, deductions
        )
        result.details = outcome.details
        result.warnings.extend(outcome.warnings)

        self._enter(result, PipelineStage.VALIDATING, cancel_event)
        report = DeclarationValidator(self.layout).validate(declarant, owner, outcome.details, owner_id)
        result.warnings.extend(report.warnings)
        if not report.is_valid:
            result.violations = report.violations
            result.status = ResultStatus.REJECTED
            result.stage = PipelineStage.REJECTED
            return

        self._enter(result, PipelineStage.ENCODING, cancel_event)
        assembler = FileAssembler(self.layout, encode_projected=self.encode_projected)
        assembled = assembler.assemble(declarant, owner, outcome.details, year)

        self._enter(result, PipelineStage.ASSEMBLING, cancel_event)
        result.payload = assembled.payload
        result.record_counts = assembled.record_counts
        result.warnings.extend(assembled.warnings)
        result.status = ResultStatus.GENERATED
        result.stage = PipelineStage.COMPLETED
        log.info(
            "Generated declaration with %d detail record(s)",
            assembled.record_counts.get("R02", 0),
            extra={"extra": {"status": result.status.value}},
        )

    def _resolve_policy(self, result: DeclarationResult) -> FinancialPolicy:
        policy = self.provider.get_financial_policy(self.company_id)
        if policy is not None:
            if policy.defaulted_settings:
                result.warnings.append(
                    GenerationWarning(
                        code=WarningCode.ADJUSTMENT_POLICY_MISSING,
                        entity="Declarant",
                        entity_id=self.company_id,
                        message=f"Default used for setting(s): {', '.join(policy.defaulted_settings)}",
                    )
                )
            return policy
        logger.warning("No financial policy for company %s, using defaults", self.company_id)
        result.warnings.append(
            GenerationWarning(
                code=WarningCode.ADJUSTMENT_POLICY_MISSING,
                entity="Declarant",
                entity_id=self.company_id,
                message=(
                    f"Using default policy: penalty {DEFAULT_POLICY.penalty_rate_percent}%, "
                    f"interest {DEFAULT_POLICY.daily_interest_rate_percent}% per day"
                ),
            )
        )
        return DEFAULT_POLICY

    @staticmethod
    def _enter(result: DeclarationResult, stage: PipelineStage, cancel_event: threading.Event | None) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise GenerationCancelledError(f"Cancelled before {stage.value}")
        logger.debug("Owner %s: %s -> %s", result.owner_id, result.stage.value, stage.value)
        result.stage = stage

    def generate_batch(
        self,
        owner_ids: list[str],
        year: int,
        cancel_event: threading.Event | None = None,
    ) -> list[DeclarationResult]:
        """Generate declarations for several owners in parallel.

        Each owner runs in its own isolated pipeline pass. Results are
        returned in the order of ``owner_ids``.
        """
        t0 = time.perf_counter()
        results: dict[str, DeclarationResult] = {}
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                executor.submit(self.generate, owner_id, year, cancel_event): owner_id
                for owner_id in dict.fromkeys(owner_ids)
            }
            for future in as_completed(futures):
                owner_id = futures[future]
                results[owner_id] = future.result()
                logger.debug("Owner %s finished with %s", owner_id, results[owner_id].status.value)

        elapsed = time.perf_counter() - t0
        logger.info("Batch of %d owner(s) for %d done in %.2fs", len(results), year, elapsed)
        return [results[owner_id] for owner_id in dict.fromkeys(owner_ids)]
