from __future__ import annotations

import re
from typing import Optional

# Dated snapshots and explicit version tags appended to a base model id.
_DATE_SUFFIX = re.compile(r"-\d{8}$")
_DASHED_DATE_SUFFIX = re.compile(r"-\d{4}-\d{2}-\d{2}$")
_VERSION_TAG_SUFFIX = re.compile(r"-v\d+(?:\.\d+)*$")

_VERSION_SEPARATOR = re.compile(r"(?<=\d)\.(?=\d)")
_COMPRESSED_VERSION = re.compile(r"-(\d)(\d)(?=-|$)")

# Benchmark-side provider slugs that are spelled differently in the capability catalog.
PROVIDER_ALIASES = {
    "meta": "llama",
    "meta-llama": "llama",
    "x-ai": "xai",
    "x.ai": "xai",
}

# Vendors whose -low/-medium/-high/-minimal suffixes are always reasoning effort,
# never part of the model name (they size models as mini/nano/flash/lite instead).
EFFORT_SUFFIX_PROVIDERS = frozenset({"google", "openai", "anthropic"})
EFFORT_SUFFIXES = ("-low", "-medium", "-high", "-minimal")

REASONING_SUFFIXES = ("-non-reasoning", "-reasoning")

INSTRUCTION_TUNED_PREFIX = "gemma-"
INSTRUCTION_TUNED_SUFFIX = "-it"


def normalize_provider(slug: str) -> str:
    """Map a provider slug to the capability catalog's spelling (lowercased)."""
    lower = (slug or "").strip().lower()
    return PROVIDER_ALIASES.get(lower, lower)


def strip_version_suffix(slug: str) -> str:
    """Drop trailing release noise: ``-YYYYMMDD``, ``-YYYY-MM-DD`` and ``-vN(.N)*``.

    Suffixes are removed until none is left, so stacked tags such as
    ``model-20240101-v2`` collapse to ``model``.
    """
    current = slug
    while True:
        stripped = _DATE_SUFFIX.sub("", current)
        stripped = _DASHED_DATE_SUFFIX.sub("", stripped)
        stripped = _VERSION_TAG_SUFFIX.sub("", stripped)
        if stripped == current:
            return current
        current = stripped


def normalize_version_separators(slug: str) -> str:
    """``gemini-2.5-flash`` -> ``gemini-2-5-flash`` (dots between digits only)."""
    return _VERSION_SEPARATOR.sub("-", slug)


def expand_compressed_version(slug: str) -> str:
    """``claude-35-sonnet`` -> ``claude-3-5-sonnet``, ``claude-21`` -> ``claude-2-1``.

    Only a hyphen followed by exactly two digits and then another hyphen (or the
    end of the string) is treated as a compressed version.
    """
    return _COMPRESSED_VERSION.sub(r"-\1-\2", slug)


def strip_provider_prefix(slug: str) -> str:
    """``mistral/mistral-large-3`` -> ``mistral-large-3``."""
    _, sep, rest = slug.partition("/")
    return rest if sep else slug


def strip_reasoning_suffix(slug: str) -> Optional[str]:
    """Return the slug without ``-non-reasoning`` / ``-reasoning``, or None if absent."""
    for suffix in REASONING_SUFFIXES:
        if slug.endswith(suffix):
            return slug[: -len(suffix)]
    return None


def strip_effort_suffix(slug: str, provider: Optional[str]) -> Optional[str]:
    """Strip an effort-level suffix for allow-listed providers only.

    Returns None when the provider is not allow-listed (``mistral-medium`` is a
    real Mistral model) or when no effort suffix is present.
    """
    if not provider or provider.strip().lower() not in EFFORT_SUFFIX_PROVIDERS:
        return None
    for suffix in EFFORT_SUFFIXES:
        if slug.endswith(suffix):
            return slug[: -len(suffix)]
    return None


def add_instruction_tuned_suffix(slug: str) -> Optional[str]:
    """``gemma-3-12b`` -> ``gemma-3-12b-it``; None for other families or if already tuned."""
    if slug.startswith(INSTRUCTION_TUNED_PREFIX) and not slug.endswith(INSTRUCTION_TUNED_SUFFIX):
        return slug + INSTRUCTION_TUNED_SUFFIX
    return None


NORMALIZATION_EXAMPLES = {
    # (transform name, input) -> output
    ("strip_version_suffix", "claude-3-5-sonnet-20241022"): "claude-3-5-sonnet",
    ("strip_version_suffix", "gpt-4o-2024-08-06"): "gpt-4o",
    ("strip_version_suffix", "model-v1.2.3"): "model",
    ("normalize_version_separators", "gemini-2.5-flash"): "gemini-2-5-flash",
    ("normalize_version_separators", "model-1.2-foo-3.4"): "model-1-2-foo-3-4",
    ("expand_compressed_version", "claude-35-sonnet"): "claude-3-5-sonnet",
    ("expand_compressed_version", "model-35-foo-21"): "model-3-5-foo-2-1",
    ("strip_provider_prefix", "qwen/qwen3-vl-8b-instruct"): "qwen3-vl-8b-instruct",
    ("strip_reasoning_suffix", "deepseek-v3-2-non-reasoning"): "deepseek-v3-2",
    ("add_instruction_tuned_suffix", "gemma-3-12b"): "gemma-3-12b-it",
}
