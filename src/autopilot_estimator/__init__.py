"""Estimate GKE Autopilot cost and compute-class placement for a standard cluster's workloads."""

__version__ = "0.1.0"
