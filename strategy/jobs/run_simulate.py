#!/usr/bin/env python3
"""
strategy/jobs/run_simulate.py - CLI entrypoint for swap simulation.

Usage:
    python -m strategy.jobs.run_simulate --from SOL --to USDC --amount 1.5
    python -m strategy.jobs.run_simulate --from SOL --to USDC --amount 1.5 --wallet <pubkey>
    python -m strategy.jobs.run_simulate --from <mint> --to <mint> --amount 100 \
        --decimals-in 6 --decimals-out 9 --repeat 5 --delay-ms 500

Prints the simulation as JSON on stdout. Exits 1 when the simulation
could not be completed.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import click

from config import get_token
from core.constants import DEFAULT_SLIPPAGE_BPS
from core.logging import get_logger, set_global_context, setup_logging
from core.models import SimulationOutcome
from execution.simulator import SwapSimulator
from strategy.config import load_engine_config
from strategy.stats import StatsRecorder

logger = get_logger("swapsim.cli")


def resolve_token(value: str, decimals: Optional[int], side: str) -> tuple[str, str, int]:
    """
    Resolve a symbol or mint to (mint, symbol, decimals).

    Decimals given on the command line win over the token list.
    """
    token = get_token(value)
    if token is not None:
        return token.mint, token.symbol, decimals if decimals is not None else token.decimals
    if decimals is None:
        raise click.BadParameter(
            f"Unknown token '{value}'; pass --decimals-{side} with a raw mint",
            param_hint=f"--{'from' if side == 'in' else 'to'}",
        )
    return value, value[:6], decimals


async def run_simulations(
    simulator: SwapSimulator,
    request: dict,
    repeat: int,
    delay_ms: int,
) -> list[SimulationOutcome]:
    """Run simulations back-to-back, sleeping between them to respect rate limits."""
    outcomes = []
    async with simulator:
        for i in range(repeat):
            if i > 0 and delay_ms > 0:
                await asyncio.sleep(delay_ms / 1000)
            outcomes.append(await simulator.simulate_detailed(**request))
    return outcomes


@click.command()
@click.option("--from", "token_in", required=True, help="Input token symbol or mint")
@click.option("--to", "token_out", required=True, help="Output token symbol or mint")
@click.option("--amount", "-a", required=True, type=str, help="Human-readable input amount")
@click.option("--decimals-in", type=int, default=None, help="Input token decimals (raw mints)")
@click.option("--decimals-out", type=int, default=None, help="Output token decimals (raw mints)")
@click.option("--wallet", "-w", default=None, help="Wallet public key for a live dry-run")
@click.option("--slippage-bps", "-s", default=DEFAULT_SLIPPAGE_BPS, type=int, help="Slippage tolerance in bps")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None, help="Engine YAML config")
@click.option("--repeat", "-r", default=1, type=click.IntRange(min=1), help="Number of simulations to run")
@click.option("--delay-ms", default=500, type=click.IntRange(min=0), help="Delay between repeated runs")
@click.option("--stats-file", type=click.Path(dir_okay=False), default=None, help="JSONL usage stats file")
@click.option("--log-level", "-l", default="WARNING", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]))
@click.option("--json-logs/--no-json-logs", default=False, help="Use JSON log format")
def main(
    token_in: str,
    token_out: str,
    amount: str,
    decimals_in: Optional[int],
    decimals_out: Optional[int],
    wallet: Optional[str],
    slippage_bps: int,
    config_path: Optional[str],
    repeat: int,
    delay_ms: int,
    stats_file: Optional[str],
    log_level: str,
    json_logs: bool,
) -> None:
    """
    SWAPSIM swap simulator.

    Estimates output, price impact, MEV exposure and fees for a swap
    without submitting anything on-chain.
    """
    setup_logging(level=log_level, json_output=json_logs)
    set_global_context(service="swapsim-cli", version="0.1.0")

    input_mint, input_symbol, input_decimals = resolve_token(token_in, decimals_in, "in")
    output_mint, output_symbol, output_decimals = resolve_token(token_out, decimals_out, "out")

    config = load_engine_config(Path(config_path) if config_path else None)
    simulator = SwapSimulator(config)
    recorder = StatsRecorder(Path(stats_file)) if stats_file else None

    request = {
        "input_mint": input_mint,
        "output_mint": output_mint,
        "amount_in": amount.strip(),
        "input_decimals": input_decimals,
        "output_decimals": output_decimals,
        "wallet_address": wallet,
        "slippage_bps": slippage_bps,
        "token_in_symbol": input_symbol,
        "token_out_symbol": output_symbol,
    }

    logger.info(
        "Starting simulation",
        extra={"context": {
            "pair": f"{input_symbol}/{output_symbol}",
            "amount": amount,
            "repeat": repeat,
            "live_probe": bool(wallet),
        }},
    )

    try:
        outcomes = asyncio.run(run_simulations(simulator, request, repeat, delay_ms))
    except KeyboardInterrupt:
        logger.info("Simulation interrupted")
        sys.exit(130)

    failed = False
    for outcome in outcomes:
        if recorder is not None:
            recorder.record_outcome(outcome.result)
        click.echo(json.dumps(outcome.to_dict(), indent=2))
        if outcome.failure is not None:
            failed = True
            click.echo(f"Simulation unavailable: {outcome.failure.user_message}", err=True)

    if recorder is not None:
        stats = recorder.read_stats()
        click.echo(json.dumps({"usage_stats": stats.to_dict()}, indent=2))

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
