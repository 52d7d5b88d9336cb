"""Typed view over the FastQC results payload returned by the backend."""

from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field


class ModuleSummary(BaseModel):
    module: str
    status: str  # "pass" | "warn" | "fail"


class BasicStats(BaseModel):
    total_sequences: Optional[int] = None
    sequence_length: Optional[Union[int, str]] = None
    gc_content: Optional[float] = None
    encoding: Optional[str] = None


class QualityPoint(BaseModel):
    base: Union[int, str]
    mean: Optional[float] = None
    median: Optional[float] = None


class GCBin(BaseModel):
    gc: Optional[float] = None
    count: Optional[float] = None


class ReportModules(BaseModel):
    per_base_quality: List[QualityPoint] = Field(default_factory=list)
    per_sequence_gc_content: List[GCBin] = Field(default_factory=list)


class QCReport(BaseModel):
    """Unknown keys are ignored; every section is optional."""
    filename: Optional[str] = None
    summary: List[ModuleSummary] = Field(default_factory=list)
    basic_stats: Optional[BasicStats] = None
    report_modules: ReportModules = Field(default_factory=ReportModules)

    model_config = {"extra": "ignore"}

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "QCReport":
        return cls.model_validate(payload)

    def status_counts(self) -> Dict[str, int]:
        counts = {"pass": 0, "warn": 0, "fail": 0}
        for entry in self.summary:
            counts[entry.status] = counts.get(entry.status, 0) + 1
        return counts

    def failed_modules(self) -> List[str]:
        return [s.module for s in self.summary if s.status == "fail"]
