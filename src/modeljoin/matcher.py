"""Cross-source model identity resolution.

Benchmark records (Artificial Analysis) and capability records (models.dev) never
share a canonical id, so a benchmark slug is resolved against the catalog through
a fixed cascade of strategies. The first strategy that finds a candidate wins and
its ``MatchKind`` records how the match was made.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from .model_normalization import (
    add_instruction_tuned_suffix,
    expand_compressed_version,
    normalize_provider,
    normalize_version_separators,
    strip_effort_suffix,
    strip_provider_prefix,
    strip_reasoning_suffix,
    strip_version_suffix,
)
from .records import CapabilityModel, CapabilityProvider

logger = logging.getLogger(__name__)


class MatchKind(str, Enum):
    """How a match was found, in cascade priority order."""

    EXACT = "exact"
    NORMALIZED_PROVIDER = "normalized_provider"
    FUZZY = "fuzzy"
    NORMALIZED_VERSION_SEPARATOR = "normalized_version_separator"
    STRIPPED_PROVIDER_PREFIX = "stripped_provider_prefix"
    REASONING_VARIANT = "reasoning_variant"
    EXPANDED_VERSION = "expanded_version"
    GEMMA_IT_SUFFIX = "gemma_it_suffix"
    EFFORT_LEVEL = "effort_level"


@dataclass(frozen=True)
class MatchResult:
    provider_id: str
    model: CapabilityModel
    kind: MatchKind


# Candidate id views a probe can compare against.
ORIGINAL = "original"
STRIPPED_VERSION = "stripped_version"
NORMALIZED_SEPARATORS = "normalized_separators"
STRIPPED_PREFIX = "stripped_prefix"


@dataclass(frozen=True)
class Candidate:
    """A catalog model with its lowercased id precomputed under every view."""

    provider_id: str
    model_id: str
    model: CapabilityModel
    original: str
    stripped_version: str
    normalized_separators: str
    stripped_prefix: str

    @classmethod
    def build(cls, provider_id: str, model_id: str, model: CapabilityModel) -> "Candidate":
        lower = model_id.lower()
        return cls(
            provider_id=provider_id,
            model_id=model_id,
            model=model,
            original=lower,
            stripped_version=strip_version_suffix(lower),
            normalized_separators=normalize_version_separators(lower),
            stripped_prefix=strip_provider_prefix(lower),
        )

    def view(self, name: str) -> str:
        return getattr(self, name)


class CandidateIndex:
    """Catalog models in a fixed (provider id, model id) order.

    The order makes every "first candidate that satisfies X" scan deterministic,
    independent of how the source mapping happened to be ordered.
    """

    def __init__(self, providers: Mapping[str, CapabilityProvider]):
        by_provider: Dict[str, List[Candidate]] = {}
        for key in sorted(providers):
            provider = providers[key]
            provider_id = provider.id or key
            by_provider[key] = [
                Candidate.build(provider_id, model_id, provider.models[model_id])
                for model_id in sorted(provider.models)
            ]
        self._by_provider = by_provider
        self.candidates: List[Candidate] = [c for key in sorted(by_provider) for c in by_provider[key]]

    def __len__(self) -> int:
        return len(self.candidates)

    def in_provider(self, provider_key: str) -> List[Candidate]:
        return self._by_provider.get(provider_key, [])

    def find(self, value: str, view: str = ORIGINAL) -> Optional[Candidate]:
        for candidate in self.candidates:
            if candidate.view(view) == value:
                return candidate
        return None


Probe = Tuple[Optional[str], str]


def _variant_probes(base: str, *, with_prefix: bool = False) -> List[Probe]:
    """Direct, separator-normalized (both directions) and optionally prefix-stripped probes."""
    normalized = normalize_version_separators(base)
    probes: List[Probe] = [
        (base, ORIGINAL),
        (normalized if normalized != base else None, ORIGINAL),
        (base, NORMALIZED_SEPARATORS),
    ]
    if with_prefix:
        probes.append((base, STRIPPED_PREFIX))
    return probes


def _strategies(slug: str, creator_slug: Optional[str]) -> Iterator[Tuple[MatchKind, List[Probe]]]:
    # The namespace-scoped exact lookup runs in find_match before these.
    yield MatchKind.EXACT, [(slug, ORIGINAL)]

    stripped = strip_version_suffix(slug)
    yield MatchKind.FUZZY, [
        (stripped if stripped != slug else None, STRIPPED_VERSION),
        (slug, STRIPPED_VERSION),
    ]

    normalized = normalize_version_separators(slug)
    yield MatchKind.NORMALIZED_VERSION_SEPARATOR, [
        (normalized if normalized != slug else None, ORIGINAL),
        (slug, NORMALIZED_SEPARATORS),
    ]

    yield MatchKind.STRIPPED_PROVIDER_PREFIX, [(slug, STRIPPED_PREFIX)]

    base = strip_reasoning_suffix(slug)
    if base is not None:
        yield MatchKind.REASONING_VARIANT, _variant_probes(base, with_prefix=True)

    expanded = expand_compressed_version(slug)
    if expanded != slug:
        yield MatchKind.EXPANDED_VERSION, _variant_probes(expanded)

    tuned = add_instruction_tuned_suffix(slug)
    if tuned is not None:
        yield MatchKind.GEMMA_IT_SUFFIX, [(tuned, ORIGINAL)]

    base = strip_effort_suffix(slug, creator_slug)
    if base is not None:
        yield MatchKind.EFFORT_LEVEL, _variant_probes(base)


def _probe(index: CandidateIndex, probes: Iterable[Probe]) -> Optional[Candidate]:
    for value, view in probes:
        if value is None:
            continue
        hit = index.find(value, view)
        if hit is not None:
            return hit
    return None


def find_match(
    creator_slug: Optional[str],
    model_slug: str,
    providers: Union[CandidateIndex, Mapping[str, CapabilityProvider]],
) -> Optional[MatchResult]:
    """Resolve a benchmark ``(creator_slug, model_slug)`` pair against the catalog.

    ``providers`` may be a prebuilt ``CandidateIndex`` (reuse it across a merge run)
    or the raw provider mapping. Returns None when no strategy finds a candidate.
    """
    index = providers if isinstance(providers, CandidateIndex) else CandidateIndex(providers)
    slug = (model_slug or "").strip().lower()
    if not slug:
        return None

    if creator_slug:
        provider = normalize_provider(creator_slug)
        for candidate in index.in_provider(provider):
            if candidate.original == slug:
                renamed = creator_slug.strip().lower() != provider
                kind = MatchKind.NORMALIZED_PROVIDER if renamed else MatchKind.EXACT
                return MatchResult(candidate.provider_id, candidate.model, kind)

    for kind, probes in _strategies(slug, creator_slug):
        hit = _probe(index, probes)
        if hit is not None:
            logger.debug(
                "matched %s/%s -> %s/%s (%s)", creator_slug, model_slug, hit.provider_id, hit.model_id, kind.value
            )
            return MatchResult(hit.provider_id, hit.model, kind)

    logger.debug("no match for %s/%s", creator_slug, model_slug)
    return None
