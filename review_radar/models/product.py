"""
Product detection models for Review Radar.
A CandidateFact is what one extraction strategy proposes; a DetectedProduct
is the accepted, normalized result handed to callers.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ExtractionMethod(str, Enum):
    """Provenance of a candidate, declared from most to least reliable."""
    STRUCTURED_DATA = "structured_data"
    STRUCTURED_DATA_GRAPH = "structured_data_graph"
    BREADCRUMB_LIST = "breadcrumb_list"
    META_TAG = "meta_tag"
    DOM_SELECTOR = "dom_selector"
    GENERIC_HEADING = "generic_heading"
    PAGE_TITLE = "page_title"

    @property
    def rank(self) -> int:
        """Position in reliability order (0 is most reliable)."""
        return list(ExtractionMethod).index(self)


class CandidateFact(BaseModel):
    """Unverified result of one strategy attempt."""
    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1, max_length=250)
    image: Optional[str] = None
    method: ExtractionMethod
    selector: Optional[str] = None


class DetectedProduct(BaseModel):
    """
    Accepted product identity.

    Only ever built from an accepted candidate, so `title` is never empty.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = Field(min_length=1)
    url: str
    source: str
    image: Optional[str] = None

    # Diagnostics
    method: ExtractionMethod
    selector: Optional[str] = None


class StrategyOutcome(str, Enum):
    """Why a strategy did or did not produce a candidate."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    MALFORMED_INPUT = "malformed_input"


@dataclass
class StrategyResult:
    """Tagged result of a single strategy attempt."""
    strategy: str
    outcome: StrategyOutcome
    candidate: Optional[CandidateFact] = None
    reason: Optional[str] = None

    @classmethod
    def found(cls, strategy: str, candidate: CandidateFact) -> "StrategyResult":
        return cls(strategy=strategy, outcome=StrategyOutcome.FOUND, candidate=candidate)

    @classmethod
    def not_found(cls, strategy: str, reason: str) -> "StrategyResult":
        return cls(strategy=strategy, outcome=StrategyOutcome.NOT_FOUND, reason=reason)

    @classmethod
    def malformed(cls, strategy: str, reason: str) -> "StrategyResult":
        return cls(strategy=strategy, outcome=StrategyOutcome.MALFORMED_INPUT, reason=reason)

    @property
    def accepted(self) -> bool:
        return self.outcome == StrategyOutcome.FOUND and self.candidate is not None


@dataclass
class CascadeReport:
    """Every attempt made by one cascade run, plus the product if any."""
    attempts: List[StrategyResult] = field(default_factory=list)
    product: Optional[DetectedProduct] = None

    @property
    def accepted(self) -> Optional[StrategyResult]:
        """The attempt that produced the product."""
        for attempt in self.attempts:
            if attempt.accepted:
                return attempt
        return None
