"""JSON export of an estimation, keyed by node name."""

import json
from pathlib import Path
from typing import Any, Dict, Union
import structlog

from autopilot_estimator.core.exceptions import EstimatorException
from autopilot_estimator.core.models import EstimationResult

logger = structlog.get_logger(__name__)


def export_json(result: EstimationResult) -> Dict[str, Any]:
    return result.export_to_dict()


def write_json(result: EstimationResult, path: Union[str, Path]) -> Path:
    """Write the node document to ``path``, creating parent directories."""
    output_path = Path(path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump(export_json(result), f, indent=1, default=str)
    except OSError as e:
        raise EstimatorException(f"Error writing json to {output_path}: {e}")

    logger.info("Wrote json output", path=str(output_path), nodes=len(result.nodes))
    return output_path
