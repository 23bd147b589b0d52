"""Token usage statistics for one generation."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict


@dataclass
class Usage:
    """Token counters reported by the vendor.

    ``thinking_tokens`` counts reasoning tokens and is disjoint from
    ``output_tokens``.
    """

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    thinking_tokens: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


__all__ = ["Usage"]
