# PATH: tests/unit/test_run_simulate.py
"""
Unit tests for the swap simulation CLI.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import click
import pytest
from click.testing import CliRunner

from core.exceptions import ErrorCode
from core.models import SimulationFailure, SimulationOutcome
from strategy.jobs.run_simulate import main, resolve_token

SOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


def _failed_outcome() -> SimulationOutcome:
    return SimulationOutcome(failure=SimulationFailure(
        code=ErrorCode.UPSTREAM_UNAVAILABLE,
        message="[UPSTREAM_UNAVAILABLE] timeout",
        user_message="Could not reach the quote service.",
    ))


def _fake_simulator(outcome: SimulationOutcome) -> MagicMock:
    simulator = MagicMock()
    simulator.simulate_detailed = AsyncMock(return_value=outcome)
    return simulator


class TestResolveToken:

    def test_symbol(self):
        assert resolve_token("sol", None, "in") == (SOL_MINT, "SOL", 9)

    def test_decimals_override(self):
        assert resolve_token("USDC", 8, "out")[2] == 8

    def test_unknown_mint_needs_decimals(self):
        with pytest.raises(click.BadParameter):
            resolve_token("UnknownMint1111111111111111111111111111111", None, "in")

    def test_unknown_mint_with_decimals(self):
        mint = "UnknownMint1111111111111111111111111111111"
        assert resolve_token(mint, 4, "in") == (mint, mint[:6], 4)


class TestMain:

    def test_failure_exits_nonzero(self):
        simulator = _fake_simulator(_failed_outcome())
        runner = CliRunner()

        with patch("strategy.jobs.run_simulate.SwapSimulator", return_value=simulator):
            result = runner.invoke(main, ["--from", "SOL", "--to", "USDC", "--amount", "1.5"])

        assert result.exit_code == 1
        assert '"ok": false' in result.output
        simulator.simulate_detailed.assert_awaited_once()
        kwargs = simulator.simulate_detailed.await_args.kwargs
        assert kwargs["input_mint"] == SOL_MINT
        assert kwargs["output_mint"] == USDC_MINT
        assert kwargs["amount_in"] == "1.5"
        assert kwargs["input_decimals"] == 9
        assert kwargs["output_decimals"] == 6

    def test_repeat_records_stats(self, tmp_path):
        simulator = _fake_simulator(_failed_outcome())
        stats_file = tmp_path / "usage.jsonl"
        runner = CliRunner()

        with patch("strategy.jobs.run_simulate.SwapSimulator", return_value=simulator):
            result = runner.invoke(main, [
                "--from", "SOL", "--to", "USDC", "--amount", "2",
                "--repeat", "3", "--delay-ms", "0",
                "--stats-file", str(stats_file),
            ])

        assert simulator.simulate_detailed.await_count == 3
        assert len(stats_file.read_text(encoding="utf-8").splitlines()) == 3
        assert '"total_simulations": 3' in result.output

    def test_unknown_token_is_usage_error(self):
        result = CliRunner().invoke(main, ["--from", "NOPE", "--to", "USDC", "--amount", "1"])
        assert result.exit_code == 2
