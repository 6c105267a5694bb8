from conftest import AA_PAYLOAD, MODELS_DEV_PAYLOAD

from modeljoin.records import BenchmarkModel, CapabilityModel, parse_benchmarks, parse_providers


def test_parse_benchmarks_v2_layout():
    models = parse_benchmarks(AA_PAYLOAD)
    assert [m.slug for m in models] == ["gpt-5-medium", "gemini-2-5-flash-reasoning", "mistral-medium"]

    gpt = models[0]
    assert gpt.creator == "OpenAI"
    assert gpt.creator_slug == "openai"
    assert gpt.intelligence == 66.4
    assert gpt.coding == 49.2
    assert gpt.input_price == 1.25
    assert gpt.output_price == 10.0
    assert gpt.price == 3.44
    assert gpt.tps == 102.5
    assert gpt.ttft == 18.3
    assert gpt.hle is None


def test_benchmark_nested_layout_and_display_name():
    model = BenchmarkModel.from_dict(
        {
            "id": 123,
            "name": "GPT-4",
            "slug": "gpt-4",
            "short_name": "GPT-4 (short)",
            "creator": {"name": "OpenAI", "slug": "openai"},
            "evaluations": {"artificialAnalysisIntelligenceIndex": 85.5, "gpqa": 0.5},
            "pricing": {"inputTokens": 0.03, "outputTokens": 0.06},
            "speed": {"tokensPerSecond": 50.0},
        }
    )
    assert model.id == "123"
    assert model.creator_slug == "openai"
    assert model.intelligence == 85.5
    assert model.input_price == 0.03
    assert model.tps == 50.0
    assert model.display_name == "GPT-4 (short)"


def test_benchmark_missing_sections():
    model = BenchmarkModel.from_dict({"id": 456, "name": "Test Model", "slug": "test-model"})
    assert model.creator == ""
    assert model.creator_slug is None
    assert model.intelligence is None
    assert model.price is None
    assert model.display_name == "Test Model"


def test_parse_benchmarks_accepts_bare_list_and_skips_junk():
    models = parse_benchmarks([{"id": 1, "name": "A", "slug": "a"}, "junk", None])
    assert [m.slug for m in models] == ["a"]
    assert parse_benchmarks({"data": "nope"}) == []


def test_parse_providers():
    providers = parse_providers(MODELS_DEV_PAYLOAD)
    assert sorted(providers) == ["google", "openai"]

    openai = providers["openai"]
    assert openai.name == "OpenAI"
    assert openai.env == ["OPENAI_API_KEY"]
    gpt5 = openai.models["gpt-5"]
    assert gpt5.reasoning is True
    assert gpt5.temperature is False
    assert gpt5.context_window == 400000
    assert gpt5.max_input_tokens == 272000
    assert gpt5.max_output_tokens == 128000
    assert gpt5.cost_output == 10.0
    assert gpt5.cost_cache_write is None
    assert gpt5.input_modalities == ("text", "image")


def test_capability_flags_are_tri_state():
    model = CapabilityModel.from_dict({"name": "No flags"}, model_id="x")
    assert model.id == "x"
    assert model.attachment is None
    assert model.reasoning is None
    assert model.tool_call is None
    assert model.structured_output is None
    assert model.temperature is None
    assert model.input_modalities == ()

    # Non-boolean junk is "unknown", not a truthy/falsy guess.
    assert CapabilityModel.from_dict({"reasoning": "yes", "tool_call": 0}).reasoning is None
    assert CapabilityModel.from_dict({"reasoning": "yes", "tool_call": 0}).tool_call is None


def test_provider_id_falls_back_to_mapping_key():
    providers = parse_providers({"llama": {"name": "Llama", "models": {"llama-3-70b": {}}}})
    assert providers["llama"].id == "llama"
    assert providers["llama"].models["llama-3-70b"].id == "llama-3-70b"
    assert parse_providers(["not", "a", "mapping"]) == {}
