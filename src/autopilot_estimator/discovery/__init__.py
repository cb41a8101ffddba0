from .estimation_orchestrator import EstimationOrchestrator

__all__ = ["EstimationOrchestrator"]
