"""Translation of Terraform's plan JSON into the canonical change model."""

from .plan_normalizer import PlanNormalizer, flatten_marks

__all__ = ["PlanNormalizer", "flatten_marks"]
