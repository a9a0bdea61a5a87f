"""
Core DNS reconciliation functionality.

This package contains the endpoint model, the domain filter and the
reconciler that turns change sets into full per-domain record lists.
"""

from .domain_filter import DomainFilter
from .endpoint import ChangeSet, Endpoint
from .reconciler import ApplyResult, Reconciler

__all__ = ["ApplyResult", "ChangeSet", "DomainFilter", "Endpoint", "Reconciler"]
