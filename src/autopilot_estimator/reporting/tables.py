"""Terminal tables for nodes, workloads and cluster totals."""

from typing import Dict, List, Sequence, Tuple
import click

from autopilot_estimator.core.models import ClusterCostSummary, Node
from autopilot_estimator.core.utils import format_hourly_cost

Column = Tuple[str, int]

NODE_COLUMNS: List[Column] = [
    ("Name", 55),
    ("Type", 15),
    ("Region", 20),
    ("Spot?", 10),
]

WORKLOAD_COLUMNS: List[Column] = [
    ("Node", 55),
    ("Workload", 40),
    ("Containers", 10),
    ("Spot", 10),
    ("mCPU", 10),
    ("Memory MiB", 10),
    ("Storage MiB", 12),
    ("Compute Class", 13),
    ("Price $/H", 10),
]


def _fit(value: str, width: int) -> str:
    if len(value) > width:
        return value[:width - 1] + "…"
    return value.ljust(width)


def render_table(columns: Sequence[Column], rows: Sequence[Sequence[str]], color: bool = True) -> str:
    """Fixed-width table with a styled header row."""
    header = " ".join(_fit(title, width) for title, width in columns)
    rule = " ".join("─" * width for _, width in columns)
    lines = [click.style(header, bold=True) if color else header, rule]
    for row in rows:
        lines.append(" ".join(_fit(str(cell), width) for cell, (_, width) in zip(row, columns)))
    return "\n".join(line.rstrip() for line in lines)


def node_rows(nodes: Dict[str, Node]) -> List[List[str]]:
    return [
        [node.name, node.instance_type, node.region, str(node.spot).lower()]
        for node in nodes.values()
    ]


def workload_rows(nodes: Dict[str, Node], summary: ClusterCostSummary) -> List[List[str]]:
    """One row per hosted workload followed by the three cluster totals."""
    rows = []
    for node in nodes.values():
        for workload in node.workloads:
            rows.append([
                node.name,
                workload.name,
                str(workload.containers),
                str(node.spot).lower(),
                str(workload.usage.cpu_milli),
                str(workload.usage.memory_mib),
                str(workload.usage.storage_mib),
                workload.compute_class.value,
                format_hourly_cost(workload.cost),
            ])

    padding = [""] * (len(WORKLOAD_COLUMNS) - 2)
    rows.append(["Total cost per cluster per hour", *padding, format_hourly_cost(summary.total)])
    rows.append(["... 1 year commit", *padding, format_hourly_cost(summary.total_1yr)])
    rows.append(["... with 3 year commit", *padding, format_hourly_cost(summary.total_3yr)])
    return rows


def render_node_table(nodes: Dict[str, Node], color: bool = True) -> str:
    return render_table(NODE_COLUMNS, node_rows(nodes), color)


def render_workload_table(nodes: Dict[str, Node], summary: ClusterCostSummary, color: bool = True) -> str:
    return render_table(WORKLOAD_COLUMNS, workload_rows(nodes, summary), color)
