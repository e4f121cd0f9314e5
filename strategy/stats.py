"""
strategy/stats.py - Usage statistics collector.

Consumes SimulationResult records produced by the engine; the engine itself
never touches these counters.

Features:
- JSONL persistence (one line per recorded simulation), optional
- Aggregated UsageStats recomputed from the records on read
- Failed simulations (no result) counted towards the success rate
"""

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from core.constants import RiskLevel
from core.logging import get_logger
from core.models import SimulationResult
from core.time import now_iso

logger = get_logger(__name__)

MEV_FLAGGED_LEVELS = {RiskLevel.HIGH.value, RiskLevel.CRITICAL.value}


@dataclass
class SimulationRecord:
    """One line of the stats log."""
    timestamp: str
    token_in: str
    token_out: str
    completed: bool
    execution_succeeded: bool = False
    compute_units_used: int = 0
    priority_fee_lamports: int = 0
    risk_level: str = ""
    sandwich_risk: bool = False
    frontrun_risk: bool = False

    @classmethod
    def from_result(cls, result: Optional[SimulationResult]) -> "SimulationRecord":
        if result is None:
            return cls(timestamp=now_iso(), token_in="", token_out="", completed=False)
        return cls(
            timestamp=now_iso(),
            token_in=result.token_in,
            token_out=result.token_out,
            completed=True,
            execution_succeeded=result.execution.succeeded,
            compute_units_used=result.execution.compute_units_used,
            priority_fee_lamports=result.cost.priority_fee_lamports,
            risk_level=result.risk.level.value,
            sandwich_risk=result.risk.sandwich_risk,
            frontrun_risk=result.risk.frontrun_risk,
        )

    @property
    def mev_flagged(self) -> bool:
        return self.sandwich_risk or self.frontrun_risk or self.risk_level in MEV_FLAGGED_LEVELS

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SimulationRecord":
        return cls(**data)


@dataclass(frozen=True)
class UsageStats:
    """Aggregated counters."""
    total_simulations: int = 0
    success_rate: float = 0.0
    avg_compute_units: int = 0
    avg_priority_fee: int = 0
    mev_detected: int = 0
    saved_from_failure: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def aggregate(records: list[SimulationRecord]) -> UsageStats:
    """Compute UsageStats from records."""
    if not records:
        return UsageStats()

    completed = [r for r in records if r.completed]
    succeeded = [r for r in completed if r.execution_succeeded]

    avg_units = sum(r.compute_units_used for r in completed) // len(completed) if completed else 0
    avg_fee = sum(r.priority_fee_lamports for r in completed) // len(completed) if completed else 0

    return UsageStats(
        total_simulations=len(records),
        success_rate=round(len(succeeded) / len(records) * 100, 1),
        avg_compute_units=avg_units,
        avg_priority_fee=avg_fee,
        mev_detected=sum(1 for r in completed if r.mev_flagged),
        # Predicted failures the user did not have to pay for
        saved_from_failure=sum(1 for r in completed if not r.execution_succeeded),
    )


class StatsRecorder:
    """
    Append/read interface for usage counters.

    Usage:
        recorder = StatsRecorder(Path("data/stats.jsonl"))
        recorder.record_outcome(result)
        stats = recorder.read_stats()
    """

    def __init__(self, stats_file: Optional[Path] = None):
        self.stats_file = stats_file
        self._records: list[SimulationRecord] = []
        if stats_file is not None:
            stats_file.parent.mkdir(parents=True, exist_ok=True)

    def record_outcome(self, result: Optional[SimulationResult]) -> SimulationRecord:
        """Record one simulation; None records a failed simulation."""
        record = SimulationRecord.from_result(result)
        if self.stats_file is None:
            self._records.append(record)
        else:
            with open(self.stats_file, "a", encoding="utf-8") as f:
                f.write(json.dumps(record.to_dict()) + "\n")

        logger.debug(
            "Simulation recorded",
            extra={"context": {"completed": record.completed, "mev_flagged": record.mev_flagged}},
        )
        return record

    def load_records(self) -> list[SimulationRecord]:
        """All recorded simulations, oldest first."""
        if self.stats_file is None:
            return list(self._records)

        records = []
        if not self.stats_file.exists():
            return records
        with open(self.stats_file, "r", encoding="utf-8") as f:
            for line in f:
                if line.strip():
                    records.append(SimulationRecord.from_dict(json.loads(line)))
        return records

    def read_stats(self) -> UsageStats:
        """Aggregate counters over every recorded simulation."""
        return aggregate(self.load_records())
