"""
QA Kernel - compliance rule evaluation core

Value objects, persistence contract and read paths for:
- Declarative QA check definitions with tiered severity
- Per-entity check contexts assembled from the entity store
- Prioritized compliance work-queue signals
- Typed settings with documented defaults
"""

__version__ = "0.1.0"
