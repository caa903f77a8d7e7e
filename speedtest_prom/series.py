"""Data structures for metric values."""
from dataclasses import dataclass, field
from typing import Dict


@dataclass
class MetricValue:
    """A metric value with its value-specific labels."""
    value: float
    labels: Dict[str, str] = field(default_factory=dict)
