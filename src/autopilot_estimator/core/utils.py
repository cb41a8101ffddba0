"""Utility functions and decorators."""

import logging.config
import structlog
import yaml
from pathlib import Path
from typing import Optional, Union
from tenacity import retry, stop_after_attempt, wait_exponential


def retry_with_backoff(
    max_retries: int = 3,
    backoff_factor: float = 1.5,
    max_wait: float = 60.0
):
    """Decorator for retry with exponential backoff."""
    return retry(
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=backoff_factor, max=max_wait),
        reraise=True
    )


def setup_logging(
    config_path: Optional[Union[str, Path]] = None,
    log_level: str = "INFO",
    log_format: str = "text"
) -> None:
    """Setup structured logging configuration."""
    if config_path and Path(config_path).exists():
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
        logging.config.dictConfig(config)
    else:
        logging.basicConfig(
            level=getattr(logging, log_level.upper()),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    json_output = bool(config_path) or log_format.lower() == "json"

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def format_hourly_cost(cost: float) -> str:
    """Format a $/hour figure with seven significant digits."""
    return f"{cost:.7g}"


def region_from_location(location: str) -> str:
    """Turn a GKE location (zone or region) into its region.

    ``us-central1-a`` becomes ``us-central1``; ``europe-west4`` is already a
    region and is returned unchanged.
    """
    parts = location.split("-")
    if len(parts) > 2:
        return "-".join(parts[:-1])
    return location
