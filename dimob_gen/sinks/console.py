"""Console sink for operators and debugging."""

import json

from dimob_gen.models import DeclarationResult, ResultStatus
from dimob_gen.sinks.serialization import result_to_dict


class ConsoleSink:
    """Print a summary of each pipeline run to stdout."""

    def __init__(self, pretty: bool = True, verbose: bool = False) -> None:
        """Initialize console sink.

        Parameters
        ----------
        pretty : bool
            Pretty-print JSON output in verbose mode.
        verbose : bool
            Print the full JSON report instead of the one-line summary.
        """
        self.pretty = pretty
        self.verbose = verbose
        self._counts: dict[str, int] = {}

    def write(self, result: DeclarationResult) -> None:
        """Print one result."""
        status = result.status.value
        self._counts[status] = self._counts.get(status, 0) + 1

        if self.verbose:
            data = result_to_dict(result)
            print(json.dumps(data, indent=2 if self.pretty else None, ensure_ascii=False, default=str))
            return

        line = f"[{status:<9}] owner={result.owner_id} year={result.fiscal_year}"
        if result.success:
            line += f" records={result.record_counts}"
        print(line)

        if result.status is ResultStatus.REJECTED:
            for violation in result.violations:
                where = f" (contract {violation.contract_id})" if violation.contract_id else ""
                print(
                    f"    {violation.entity} {violation.entity_id}{where}: "
                    f"{violation.field} {violation.reason.value}"
                )
        for warning in result.warnings:
            print(f"    warning {warning.code.value}: {warning.entity} {warning.entity_id} {warning.message}")

    def close(self) -> None:
        """Print summary."""
        print(f"\n{'='*60}")
        print("Declaration Summary")
        print("=" * 60)
        for status, count in self._counts.items():
            print(f"  {status}: {count} owner(s)")
