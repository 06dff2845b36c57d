"""
ProjectPulse Shared Contracts
=============================

Stable response models for the service's operational surface.

Version: 1.0.0
"""

from shared.contracts.pulse import DependencyHealth, ServiceHealth

__all__ = [
    "DependencyHealth",
    "ServiceHealth",
]
