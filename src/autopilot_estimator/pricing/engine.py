"""Autopilot pricing engine: per-workload cost and cluster roll-up."""

from typing import Dict, Iterable, List, Optional
import structlog

from autopilot_estimator.core.constants import (
    ARM_TYPE_PREFIX,
    CLUSTER_FEE,
    ONE_YEAR_DISCOUNT,
    THREE_YEAR_DISCOUNT,
)
from autopilot_estimator.core.models import (
    ClusterCostSummary,
    ComputeClass,
    Node,
    RegionPricing,
    ResourcePrice,
    Workload,
    WorkloadUsage,
)
from autopilot_estimator.pricing.classifier import classify
from autopilot_estimator.pricing.normalizer import normalize

logger = structlog.get_logger(__name__)


def resolve_price(pricing: RegionPricing, compute_class: ComputeClass, spot: bool) -> ResourcePrice:
    """CPU and memory unit prices for a class in the given billing mode.

    Anything that is not a known compute class is billed as Regular. Spot
    Balanced pods are billed with the spot Regular pair.
    """
    try:
        compute_class = ComputeClass(compute_class)
    except ValueError:
        compute_class = ComputeClass.REGULAR

    if spot and compute_class == ComputeClass.BALANCED:
        resource_price = pricing.get(ComputeClass.REGULAR, True)
    else:
        resource_price = pricing.get(compute_class, spot)

    if compute_class == ComputeClass.SCALE_OUT_ARM and not resource_price.is_complete:
        logger.warning(
            "ARM pricing is not available in this region",
            region=pricing.region,
            spot=spot,
            cpu_price=resource_price.cpu,
            memory_price=resource_price.memory,
        )

    return resource_price


def price(
    cpu_milli: int,
    memory_mib: int,
    storage_mib: int,
    pricing: RegionPricing,
    compute_class: ComputeClass,
    spot: bool
) -> float:
    """Hourly cost of a pod's requests.

    Storage is always charged at the on-demand ephemeral storage rate, spot
    or not.
    """
    resource_price = resolve_price(pricing, compute_class, spot)
    return (
        resource_price.cpu * cpu_milli / 1000
        + resource_price.memory * memory_mib / 1000
        + pricing.storage_price * storage_mib / 1000
    )


def estimate_workload(
    record: WorkloadUsage,
    node: Optional[Node],
    pricing: RegionPricing,
    arm_type_prefix: str = ARM_TYPE_PREFIX
) -> Workload:
    """Normalize, classify and price one pod.

    ``node`` is the pod's host when known; without it the pod is treated as
    on-demand x86.
    """
    usage = normalize(record.cpu_milli, record.memory_mib, record.storage_mib)

    requests_arm = node.is_arm(arm_type_prefix) if node else False
    spot = node.spot if node else False

    compute_class = classify(record.name, usage.cpu_milli, usage.memory_mib, requests_arm)
    cost = price(usage.cpu_milli, usage.memory_mib, usage.storage_mib, pricing, compute_class, spot)

    return Workload(
        name=record.name,
        namespace=record.namespace,
        node_name=record.node_name,
        usage=usage,
        containers=record.containers,
        compute_class=compute_class,
        spot=spot,
        cost=cost,
    )


def estimate_workloads(
    records: Iterable[WorkloadUsage],
    nodes: Dict[str, Node],
    pricing: RegionPricing,
    arm_type_prefix: str = ARM_TYPE_PREFIX
) -> List[Workload]:
    """Price every pod against its host node, in discovery order."""
    workloads = []
    for record in records:
        node = nodes.get(record.node_name) if record.node_name else None
        if node is None:
            logger.warning(
                "Workload node is unknown, pricing as on-demand x86",
                workload=record.name,
                namespace=record.namespace,
                node=record.node_name,
            )
        workloads.append(estimate_workload(record, node, pricing, arm_type_prefix))
    return workloads


def aggregate(
    nodes: Dict[str, Node],
    workloads: Iterable[Workload],
    cluster_fee: float = CLUSTER_FEE,
    one_year_discount: float = ONE_YEAR_DISCOUNT,
    three_year_discount: float = THREE_YEAR_DISCOUNT
) -> ClusterCostSummary:
    """Fold priced workloads into their nodes and the cluster totals.

    This is the single place shared totals are written. Cluster totals are
    the fee plus the node totals, so workloads whose node is not in ``nodes``
    are logged and left out.
    """
    summary = ClusterCostSummary.seeded(cluster_fee, one_year_discount, three_year_discount)

    for workload in workloads:
        node = nodes.get(workload.node_name) if workload.node_name else None
        if node is None:
            logger.warning(
                "Workload node is unknown, leaving it out of the cluster totals",
                workload=workload.name,
                namespace=workload.namespace,
                node=workload.node_name,
                cost=workload.cost,
            )
            continue
        node.add_workload(workload)
        summary.add(workload.cost, workload.spot)

    logger.debug(
        "Aggregated workload costs",
        nodes=len(nodes),
        total=summary.total,
        spot_total=summary.spot_total,
    )
    return summary
