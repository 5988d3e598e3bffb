"""Adapters for reading plans from the outside world."""

from .plan_loader import PlanLoader, PlanLoaderError

__all__ = ["PlanLoader", "PlanLoaderError"]
