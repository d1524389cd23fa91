"""API routes package"""

from . import health, meals, pricing, plans, schedule

__all__ = ["health", "meals", "pricing", "plans", "schedule"]
