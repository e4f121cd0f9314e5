"""
Strategy jobs package.

Available entry points:
    python -m strategy.jobs.run_simulate    # Swap simulation CLI

NOTE: This __init__.py intentionally does NOT import run_simulate
to avoid side effects when importing the package.
"""

__all__: list[str] = []
