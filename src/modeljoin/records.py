from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple


def _float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _flag(value: Any) -> Optional[bool]:
    # Capability flags are tri-state: a missing key means "unknown", not False.
    return value if isinstance(value, bool) else None


def _str(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _sub(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    return value if isinstance(value, dict) else {}


def _first(*values: Any) -> Any:
    for v in values:
        if v is not None:
            return v
    return None


def _modalities(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return tuple(m.strip() for m in value.split(",") if m.strip())
    if isinstance(value, (list, tuple)):
        return tuple(str(m) for m in value if m is not None)
    return ()


@dataclass(frozen=True)
class BenchmarkModel:
    """One benchmarked model from Artificial Analysis."""

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

    @property
    def display_name(self) -> str:
        return self.short_name or self.name

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "BenchmarkModel":
        """Parse an API record.

        Accepts both the nested ``evaluations``/``pricing``/``speed`` layout and the
        flat ``median_*`` fields; the creator may live under ``creator`` or
        ``model_creator``.
        """
        creator = _sub(raw, "model_creator") or _sub(raw, "creator")
        evals = _sub(raw, "evaluations")
        pricing = _sub(raw, "pricing")
        speed = _sub(raw, "speed")

        def score(*keys: str) -> Optional[float]:
            return _float(_first(*(evals.get(k) for k in keys)))

        return cls(
            id=str(_first(raw.get("id"), raw.get("slug"), "")),
            name=str(raw.get("name") or raw.get("slug") or ""),
            slug=str(raw.get("slug") or ""),
            creator=str(creator.get("name") or creator.get("slug") or ""),
            creator_slug=_str(creator.get("slug")),
            short_name=_str(raw.get("short_name")),
            release_date=_str(raw.get("release_date")),
            intelligence=score("artificial_analysis_intelligence_index", "artificialAnalysisIntelligenceIndex"),
            coding=score("artificial_analysis_coding_index", "artificialAnalysisCodingIndex"),
            math=score("artificial_analysis_math_index", "artificialAnalysisMathIndex", "math"),
            mmlu_pro=score("mmlu_pro", "mmluPro"),
            gpqa=score("gpqa"),
            hle=score("hle"),
            livecodebench=score("livecodebench", "liveCodeBench"),
            scicode=score("scicode", "sciCode"),
            math_500=score("math_500", "math500"),
            aime=score("aime"),
            input_price=_float(_first(pricing.get("price_1m_input_tokens"), pricing.get("inputTokens"))),
            output_price=_float(_first(pricing.get("price_1m_output_tokens"), pricing.get("outputTokens"))),
            price=_float(_first(pricing.get("price_1m_blended_3_to_1"), pricing.get("blendedTokens"))),
            tps=_float(_first(raw.get("median_output_tokens_per_second"), speed.get("tokensPerSecond"))),
            ttft=_float(_first(raw.get("median_time_to_first_token_seconds"), speed.get("timeToFirstToken"))),
            latency=_float(_first(raw.get("median_time_to_first_answer_token"), speed.get("latency"))),
        )


@dataclass(frozen=True)
class CapabilityModel:
    """One model entry from the models.dev catalog."""

    id: str
    name: str = ""
    family: Optional[str] = None
    attachment: Optional[bool] = None
    reasoning: Optional[bool] = None
    tool_call: Optional[bool] = None
    structured_output: Optional[bool] = None
    temperature: Optional[bool] = None
    open_weights: Optional[bool] = None
    knowledge: Optional[str] = None
    release_date: Optional[str] = None
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

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], model_id: Optional[str] = None) -> "CapabilityModel":
        limit = _sub(raw, "limit")
        cost = _sub(raw, "cost")
        modalities = _sub(raw, "modalities")
        mid = str(_first(raw.get("id"), model_id, ""))
        return cls(
            id=mid,
            name=str(raw.get("name") or mid),
            family=_str(raw.get("family")),
            attachment=_flag(raw.get("attachment")),
            reasoning=_flag(raw.get("reasoning")),
            tool_call=_flag(raw.get("tool_call")),
            structured_output=_flag(raw.get("structured_output")),
            temperature=_flag(raw.get("temperature")),
            open_weights=_flag(raw.get("open_weights")),
            knowledge=_str(raw.get("knowledge")),
            release_date=_str(raw.get("release_date")),
            last_updated=_str(raw.get("last_updated")),
            status=_str(raw.get("status")),
            context_window=_int(limit.get("context")),
            max_input_tokens=_int(limit.get("input")),
            max_output_tokens=_int(limit.get("output")),
            cost_input=_float(cost.get("input")),
            cost_output=_float(cost.get("output")),
            cost_cache_read=_float(cost.get("cache_read")),
            cost_cache_write=_float(cost.get("cache_write")),
            input_modalities=_modalities(modalities.get("input")),
            output_modalities=_modalities(modalities.get("output")),
        )


@dataclass(frozen=True)
class CapabilityProvider:
    """A models.dev provider namespace and the models it serves."""

    id: str
    name: str = ""
    env: List[str] = field(default_factory=list)
    npm: Optional[str] = None
    api: Optional[str] = None
    doc: Optional[str] = None
    models: Dict[str, CapabilityModel] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], provider_id: Optional[str] = None) -> "CapabilityProvider":
        pid = str(_first(raw.get("id"), provider_id, ""))
        models_raw = _sub(raw, "models")
        models = {
            str(mid): CapabilityModel.from_dict(m, model_id=str(mid))
            for mid, m in models_raw.items()
            if isinstance(m, dict)
        }
        env = raw.get("env")
        return cls(
            id=pid,
            name=str(raw.get("name") or pid),
            env=[str(e) for e in env] if isinstance(env, list) else [],
            npm=_str(raw.get("npm")),
            api=_str(raw.get("api")),
            doc=_str(raw.get("doc")),
            models=models,
        )


def parse_benchmarks(payload: Any) -> List[BenchmarkModel]:
    """Parse an Artificial Analysis response (``{"data": [...]}`` or a bare list)."""
    items = payload.get("data", []) if isinstance(payload, dict) else payload
    if not isinstance(items, list):
        return []
    return [BenchmarkModel.from_dict(item) for item in items if isinstance(item, dict)]


def parse_providers(payload: Any) -> Dict[str, CapabilityProvider]:
    """Parse the models.dev ``api.json`` mapping of provider id -> provider."""
    if not isinstance(payload, dict):
        return {}
    return {
        str(pid): CapabilityProvider.from_dict(p, provider_id=str(pid))
        for pid, p in payload.items()
        if isinstance(p, dict)
    }
