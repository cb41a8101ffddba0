"""Autopilot billing constants."""

# Cloud Billing service id of GKE Autopilot
SERVICE_AUTOPILOT = "CCD8-9BF1-090E"

# Flat cluster management fee, $/hour
CLUSTER_FEE = 0.1

# Machine types backed by Arm (Tau T2A)
ARM_TYPE_PREFIX = "t2a-"

# Committed use discounts: 20% off for one year, 45% off for three years.
# Spot pods never receive them.
ONE_YEAR_DISCOUNT = 0.8
THREE_YEAR_DISCOUNT = 0.55

# Minimum billable requests
MIN_CPU_MILLI = 250
MIN_MEMORY_MIB = 500
MIN_STORAGE_MIB = 10

# Regular (general-purpose) envelope
REGULAR_MIN_RATIO = 1
REGULAR_MAX_RATIO = 6.5
REGULAR_MAX_CPU_MILLI = 30000
REGULAR_MAX_MEMORY_MIB = 110000

# Scale-Out x86 envelope
SCALE_OUT_RATIO = 4
SCALE_OUT_MAX_CPU_MILLI = 54000
SCALE_OUT_MAX_MEMORY_MIB = 216000

# Scale-Out Arm envelope
SCALE_OUT_ARM_RATIO = 4
SCALE_OUT_ARM_MAX_CPU_MILLI = 43000
SCALE_OUT_ARM_MAX_MEMORY_MIB = 172000

# Balanced envelope
BALANCED_MIN_RATIO = 1
BALANCED_MAX_RATIO = 8
