from __future__ import annotations

import logging
from collections import Counter
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .matcher import CandidateIndex, MatchKind, MatchResult, find_match
from .records import BenchmarkModel, CapabilityModel, CapabilityProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergedRow:
    """Benchmark fields plus the matched catalog's capability fields.

    Capability fields stay None (or empty) when the row is unmatched; a None flag
    means "unknown", never "unsupported".
    """

    # Benchmark identity and performance
    id: str
    name: str
    slug: str
    creator: str = ""
    creator_slug: Optional[str] = None
    short_name: Optional[str] = None
    release_date: Optional[str] = None
    intelligence: Optional[float] = None
    coding: Optional[float] = None
    math: Optional[float] = None
    mmlu_pro: Optional[float] = None
    gpqa: Optional[float] = None
    hle: Optional[float] = None
    livecodebench: Optional[float] = None
    scicode: Optional[float] = None
    math_500: Optional[float] = None
    aime: Optional[float] = None
    input_price: Optional[float] = None
    output_price: Optional[float] = None
    price: Optional[float] = None
    tps: Optional[float] = None
    ttft: Optional[float] = None
    latency: Optional[float] = None
    # Catalog capabilities
    provider_id: Optional[str] = None
    model_id: Optional[str] = None
    family: Optional[str] = None
    attachment: Optional[bool] = None
    reasoning: Optional[bool] = None
    tool_call: Optional[bool] = None
    structured_output: Optional[bool] = None
    temperature: Optional[bool] = None
    open_weights: Optional[bool] = None
    knowledge: Optional[str] = None
    last_updated: Optional[str] = None
    status: Optional[str] = None
    context_window: Optional[int] = None
    max_input_tokens: Optional[int] = None
    max_output_tokens: Optional[int] = None
    cost_input: Optional[float] = None
    cost_output: Optional[float] = None
    cost_cache_read: Optional[float] = None
    cost_cache_write: Optional[float] = None
    input_modalities: Tuple[str, ...] = ()
    output_modalities: Tuple[str, ...] = ()
    match_kind: Optional[MatchKind] = None
    matched: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict; modality lists become comma-separated strings."""
        out = asdict(self)
        out["input_modalities"] = ",".join(self.input_modalities) or None
        out["output_modalities"] = ",".join(self.output_modalities) or None
        out["match_kind"] = self.match_kind.value if self.match_kind else None
        return out


_BENCHMARK_FIELDS = tuple(f.name for f in fields(BenchmarkModel))
_ROW_FIELDS = frozenset(f.name for f in fields(MergedRow))
# Catalog fields copied verbatim; identity (id/name) and release_date stay benchmark-owned.
_CAPABILITY_FIELDS = tuple(
    f.name for f in fields(CapabilityModel) if f.name in _ROW_FIELDS and f.name not in _BENCHMARK_FIELDS
)


def merge_row(benchmark: BenchmarkModel, match: Optional[MatchResult]) -> MergedRow:
    values: Dict[str, Any] = {name: getattr(benchmark, name) for name in _BENCHMARK_FIELDS}
    if match is None:
        return MergedRow(**values)

    model = match.model
    for name in _CAPABILITY_FIELDS:
        value = getattr(model, name)
        values[name] = list(value) if isinstance(value, list) else value
    values["provider_id"] = match.provider_id
    values["model_id"] = model.id
    values["match_kind"] = match.kind
    values["matched"] = True
    return MergedRow(**values)


def merge_models(
    benchmarks: Iterable[BenchmarkModel],
    providers: Optional[Mapping[str, CapabilityProvider]],
) -> List[MergedRow]:
    """One merged row per benchmark record, in input order.

    An empty (or missing) catalog is valid input: every row comes back unmatched.
    """
    index = CandidateIndex(providers or {})
    rows = [merge_row(b, find_match(b.creator_slug, b.slug, index)) for b in benchmarks]

    if rows:
        summary = match_summary(rows)
        logger.info(
            "merged %d benchmark models against %d catalog models: %d matched (%.1f%%)",
            summary["total"],
            len(index),
            summary["matched"],
            summary["match_rate"],
        )
    return rows


def match_summary(rows: Iterable[MergedRow]) -> Dict[str, Any]:
    rows = list(rows)
    kinds = Counter(r.match_kind.value for r in rows if r.match_kind is not None)
    matched = sum(1 for r in rows if r.matched)
    total = len(rows)
    return {
        "total": total,
        "matched": matched,
        "unmatched": total - matched,
        "match_rate": (matched / total * 100) if total else 0.0,
        "by_kind": {k.value: kinds.get(k.value, 0) for k in MatchKind},
    }
