"""
core/logging.py - Structured JSON logging.

All logs include:
- timestamp (ISO 8601)
- level
- logger
- message
- context (input_mint, latency_ms, error_code, etc.)

Contextual fields are passed only via extra={"context": {...}}.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

# Global context that gets added to all log entries
_global_context: dict[str, Any] = {}


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Output format:
    {
        "timestamp": "2026-01-04T12:00:00.000+00:00",
        "level": "INFO",
        "logger": "swapsim.quote",
        "message": "Quote fetched",
        "context": {
            "input_mint": "So111...",
            "hops": 2,
            "latency_ms": 180
        }
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = {}
        context.update(_global_context)

        if hasattr(record, "context") and record.context:
            context.update(record.context)

        if record.exc_info:
            context["exception"] = self.formatException(record.exc_info)

        if context:
            log_entry["context"] = context

        return json.dumps(log_entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter; shows the first few context fields."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        base = f"{timestamp} | {record.levelname:<8} | {record.name} | {record.getMessage()}"

        context = getattr(record, "context", None)
        if context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in list(context.items())[:3])
            if len(context) > 3:
                ctx_str += f", ... (+{len(context) - 3} more)"
            base += f" | {ctx_str}"

        return base


class ContextAdapter(logging.LoggerAdapter):
    """
    Logger adapter that adds context to all log entries.
    """

    def process(
        self, msg: str, kwargs: dict[str, Any]
    ) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra", {})
        context = {**self.extra, **extra.get("context", {})}

        kwargs["extra"] = {"context": context}
        return msg, kwargs


def set_global_context(**kwargs: Any) -> None:
    """
    Set global context that gets added to all log entries.

    Example:
        set_global_context(environment="production", version="0.1.0")
    """
    _global_context.update(kwargs)


def clear_global_context() -> None:
    """Clear global logging context."""
    _global_context.clear()


def get_logger(name: str, **context: Any) -> ContextAdapter:
    """
    Get a logger with optional default context.

    Args:
        name: Logger name (e.g., "swapsim.quote")
        **context: Default context for all log entries from this logger

    Example:
        logger = get_logger("swapsim.fees", rpc="mainnet")
        logger.info("Fees sampled", extra={"context": {"samples": 150}})
    """
    logger = logging.getLogger(name)
    return ContextAdapter(logger, context)


def setup_logging(
    level: str = "INFO",
    json_output: bool = True,
    log_file: str | None = None,
) -> None:
    """
    Setup logging configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_output: Use JSON formatting (recommended for production)
        log_file: Optional file path for logging (always JSON)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    root_logger.handlers.clear()

    formatter: logging.Formatter = JSONFormatter() if json_output else ConsoleFormatter()

    # Logs go to stderr; stdout carries the simulation JSON
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    # Suppress noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def log_quote(
    logger: ContextAdapter,
    input_mint: str,
    output_mint: str,
    amount_in: int,
    amount_out: int,
    route: list[str],
    latency_ms: int,
    **extra: Any,
) -> None:
    """Log a quote fetch with standard context."""
    logger.info(
        f"Quote: {input_mint[:6]}...->{output_mint[:6]}... via {'/'.join(route)}",
        extra={
            "context": {
                "input_mint": input_mint,
                "output_mint": output_mint,
                "amount_in": amount_in,
                "amount_out": amount_out,
                "hops": len(route),
                "latency_ms": latency_ms,
                **extra,
            }
        },
    )


def log_simulation(
    logger: ContextAdapter,
    token_in: str,
    token_out: str,
    risk_level: str,
    execution_source: str,
    total_fee_lamports: int,
    **extra: Any,
) -> None:
    """Log a completed simulation with standard context."""
    logger.info(
        f"Simulation: {token_in}->{token_out} | risk={risk_level} | {execution_source}",
        extra={
            "context": {
                "token_in": token_in,
                "token_out": token_out,
                "risk_level": risk_level,
                "execution_source": execution_source,
                "total_fee_lamports": total_fee_lamports,
                **extra,
            }
        },
    )


def log_error(
    logger: ContextAdapter,
    error_code: str,
    message: str,
    **extra: Any,
) -> None:
    """Log an error with standard context."""
    logger.error(
        f"[{error_code}] {message}",
        extra={
            "context": {
                "error_code": error_code,
                **extra,
            }
        },
    )
