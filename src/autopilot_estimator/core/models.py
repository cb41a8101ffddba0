"""
Autopilot Estimator Data Models
Usage, pricing, node and workload models shared by the pricing core and its collaborators
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field
from typing import List, Optional, Dict, Any, NamedTuple
from datetime import datetime, timezone
from enum import Enum

from autopilot_estimator.core.constants import (
    ARM_TYPE_PREFIX,
    CLUSTER_FEE,
    ONE_YEAR_DISCOUNT,
    THREE_YEAR_DISCOUNT,
)


class ComputeClass(str, Enum):
    """Autopilot compute classes a pod can be billed under."""
    REGULAR = "Regular"
    BALANCED = "Balanced"
    SCALE_OUT = "Scale-Out"
    SCALE_OUT_ARM = "Scale-Out Arm"


class PriceKey(NamedTuple):
    """Composite key of a price pair: compute class and billing mode."""
    compute_class: ComputeClass
    spot: bool


class Usage(BaseModel):
    """Summed pod usage: mCPU, memory MiB and ephemeral storage MiB."""

    model_config = ConfigDict(frozen=True)

    cpu_milli: int = Field(0, ge=0, description="CPU in millicores")
    memory_mib: int = Field(0, ge=0, description="Memory in MiB")
    storage_mib: int = Field(0, ge=0, description="Ephemeral storage in MiB")


class ResourcePrice(BaseModel):
    """CPU and memory unit prices of one compute class in one billing mode."""

    model_config = ConfigDict(frozen=True)

    cpu: float = Field(0.0, ge=0, description="$ per vCPU hour")
    memory: float = Field(0.0, ge=0, description="$ per GiB hour")

    @property
    def is_complete(self) -> bool:
        """Both components carry a price."""
        return self.cpu > 0 and self.memory > 0


class RegionPricing(BaseModel):
    """Autopilot unit prices of a single region.

    Pairs missing from ``prices`` read as zero, which means "unpriced" rather
    than "free".
    """

    model_config = ConfigDict(frozen=True)

    region: str
    storage_price: float = Field(0.0, ge=0, description="$ per GiB hour of ephemeral storage")
    prices: Dict[PriceKey, ResourcePrice] = Field(default_factory=dict)

    def get(self, compute_class: ComputeClass, spot: bool) -> ResourcePrice:
        """Price pair for a class and billing mode, zero when absent."""
        return self.prices.get(PriceKey(ComputeClass(compute_class), bool(spot)), ResourcePrice())

    @property
    def is_empty(self) -> bool:
        """No unit price at all was found for the region."""
        return self.storage_price == 0 and not any(
            price.cpu or price.memory for price in self.prices.values()
        )


class CatalogSku(BaseModel):
    """A priced Autopilot SKU as supplied by the billing catalog."""

    sku_id: str = ""
    description: str
    service_regions: List[str] = Field(default_factory=list)
    units: int = 0
    nanos: int = 0
    display_quantity: float = 1.0


class WorkloadUsage(BaseModel):
    """Raw usage of one pod as reported by the metrics source."""

    name: str
    namespace: str = "default"
    node_name: Optional[str] = None
    cpu_milli: int = Field(0, ge=0)
    memory_mib: int = Field(0, ge=0)
    storage_mib: int = Field(0, ge=0)
    containers: int = Field(0, ge=0)


class Workload(BaseModel):
    """A priced pod: normalized usage, compute class and hourly cost."""

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str = "default"
    node_name: Optional[str] = None
    usage: Usage
    containers: int = Field(0, ge=0)
    compute_class: ComputeClass
    spot: bool = False
    cost: float = Field(0.0, ge=0, description="$ per hour")


class Node(BaseModel):
    """A node of the source cluster with the workloads it hosts."""

    name: str
    instance_type: str = "Unknown"
    region: str = "Unknown"
    spot: bool = False
    workloads: List[Workload] = Field(default_factory=list)
    cost: float = Field(0.0, ge=0, description="Sum of hosted workload costs, $ per hour")

    def is_arm(self, arm_type_prefix: str = ARM_TYPE_PREFIX) -> bool:
        """Check if the node runs an Arm machine type."""
        return arm_type_prefix in self.instance_type

    def add_workload(self, workload: Workload) -> None:
        """Attach a priced workload and add its cost to the running total."""
        self.workloads.append(workload)
        self.cost += workload.cost

    @property
    def workload_count(self) -> int:
        return len(self.workloads)


class ClusterCostSummary(BaseModel):
    """Cluster-wide hourly totals under the commitment scenarios."""

    cluster_fee: float = Field(CLUSTER_FEE, ge=0)
    non_spot_total: float = Field(CLUSTER_FEE, ge=0, description="Cluster fee plus on-demand workloads")
    spot_total: float = Field(0.0, ge=0)
    one_year_discount: float = ONE_YEAR_DISCOUNT
    three_year_discount: float = THREE_YEAR_DISCOUNT

    @classmethod
    def seeded(
        cls,
        cluster_fee: float = CLUSTER_FEE,
        one_year_discount: float = ONE_YEAR_DISCOUNT,
        three_year_discount: float = THREE_YEAR_DISCOUNT,
    ) -> "ClusterCostSummary":
        """Empty summary whose on-demand total starts at the cluster fee."""
        return cls(
            cluster_fee=cluster_fee,
            non_spot_total=cluster_fee,
            one_year_discount=one_year_discount,
            three_year_discount=three_year_discount,
        )

    def add(self, cost: float, spot: bool) -> None:
        """Accumulate one workload cost into the matching billing mode."""
        if spot:
            self.spot_total += cost
        else:
            self.non_spot_total += cost

    def merge(self, other: "ClusterCostSummary") -> "ClusterCostSummary":
        """Combine two partial summaries, counting the cluster fee once."""
        return ClusterCostSummary(
            cluster_fee=self.cluster_fee,
            non_spot_total=self.non_spot_total + other.non_spot_total - other.cluster_fee,
            spot_total=self.spot_total + other.spot_total,
            one_year_discount=self.one_year_discount,
            three_year_discount=self.three_year_discount,
        )

    @computed_field
    @property
    def total(self) -> float:
        return self.non_spot_total + self.spot_total

    @computed_field
    @property
    def total_1yr(self) -> float:
        return self.spot_total + self.non_spot_total * self.one_year_discount

    @computed_field
    @property
    def total_3yr(self) -> float:
        return self.spot_total + self.non_spot_total * self.three_year_discount


class ClusterContext(BaseModel):
    """Cluster coordinates parsed from a GKE kubeconfig context."""

    project: str
    location: str
    region: str
    cluster_name: str


class EstimationResult(BaseModel):
    """Everything the presentation layer needs from one estimation run."""

    cluster_name: str = "unknown"
    region: str
    nodes: Dict[str, Node] = Field(default_factory=dict)
    workloads: List[Workload] = Field(default_factory=list)
    summary: ClusterCostSummary = Field(default_factory=ClusterCostSummary)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_workloads(self) -> int:
        return len(self.workloads)

    def export_to_dict(self) -> Dict[str, Any]:
        """Flat JSON document keyed by node name."""
        return {name: node.model_dump(mode="json") for name, node in self.nodes.items()}
