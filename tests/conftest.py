from __future__ import annotations

from modeljoin.records import CapabilityModel, CapabilityProvider


def make_model(model_id: str, **kwargs) -> CapabilityModel:
    defaults = dict(attachment=True, reasoning=False, tool_call=True, structured_output=True, temperature=True)
    defaults.update(kwargs)
    return CapabilityModel(id=model_id, name=model_id, **defaults)


def make_providers(catalog: dict[str, list[str]]) -> dict[str, CapabilityProvider]:
    return {
        pid: CapabilityProvider(id=pid, name=pid, models={mid: make_model(mid) for mid in model_ids})
        for pid, model_ids in catalog.items()
    }


MODELS_DEV_PAYLOAD = {
    "openai": {
        "id": "openai",
        "name": "OpenAI",
        "env": ["OPENAI_API_KEY"],
        "npm": "@ai-sdk/openai",
        "doc": "https://platform.openai.com/docs/models",
        "models": {
            "gpt-5": {
                "id": "gpt-5",
                "name": "GPT-5",
                "attachment": True,
                "reasoning": True,
                "tool_call": True,
                "structured_output": True,
                "temperature": False,
                "knowledge": "2024-09-30",
                "release_date": "2025-08-07",
                "last_updated": "2025-08-07",
                "open_weights": False,
                "limit": {"context": 400000, "input": 272000, "output": 128000},
                "cost": {"input": 1.25, "output": 10, "cache_read": 0.125},
                "modalities": {"input": ["text", "image"], "output": ["text"]},
            },
        },
    },
    "google": {
        "id": "google",
        "name": "Google",
        "models": {
            "gemini-2.5-flash": {
                "id": "gemini-2.5-flash",
                "name": "Gemini 2.5 Flash",
                "reasoning": True,
                "tool_call": True,
                "limit": {"context": 1048576, "output": 65536},
                "modalities": {"input": ["text", "image", "audio", "video", "pdf"], "output": ["text"]},
            },
        },
    },
}


AA_PAYLOAD = {
    "status": 200,
    "data": [
        {
            "id": "2dad8957-4c16-4e74-bf2d-8b21514e0ae9",
            "name": "GPT-5 (medium)",
            "slug": "gpt-5-medium",
            "release_date": "2025-08-07",
            "model_creator": {"id": "e67e56e3", "name": "OpenAI", "slug": "openai"},
            "evaluations": {
                "artificial_analysis_intelligence_index": 66.4,
                "artificial_analysis_coding_index": 49.2,
                "mmlu_pro": 0.867,
                "gpqa": 0.842,
            },
            "pricing": {"price_1m_blended_3_to_1": 3.44, "price_1m_input_tokens": 1.25, "price_1m_output_tokens": 10},
            "median_output_tokens_per_second": 102.5,
            "median_time_to_first_token_seconds": 18.3,
        },
        {
            "id": "b1f4c1b2",
            "name": "Gemini 2.5 Flash (Reasoning)",
            "slug": "gemini-2-5-flash-reasoning",
            "model_creator": {"name": "Google", "slug": "google"},
            "evaluations": {"artificial_analysis_intelligence_index": 54.0},
        },
        {
            "id": "c0ffee00",
            "name": "Mistral Medium",
            "slug": "mistral-medium",
            "model_creator": {"name": "Mistral", "slug": "mistral"},
        },
    ],
}
