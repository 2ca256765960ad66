import pytest

from geminikit.errors import JsonError
from geminikit.functions import FunctionBuilder, FunctionCall, FunctionResponse, Tool, ToolKind
from geminikit.models import (
    BlockReason,
    Candidate,
    Content,
    CountTokensRequest,
    CountTokensResponse,
    FileData,
    FileDataPart,
    FinishReason,
    FunctionCallPart,
    FunctionResponsePart,
    GenerateContentRequest,
    GenerateContentResponse,
    GenerationConfig,
    HarmBlockThreshold,
    HarmCategory,
    HarmProbability,
    InlineData,
    InlineDataPart,
    ResponseSchema,
    Role,
    SafetySetting,
    SchemaType,
    TextPart,
    UsageMetadata,
    enum_schema,
    json_schema,
    part_from_dict,
)
from geminikit.thinking import ThinkingConfig


def test_content_creation():
    content = Content.user("Hello")
    assert content.role == Role.USER
    assert len(content.parts) == 1
    assert content.parts[0] == TextPart("Hello")


def test_generate_content_request_default():
    request = GenerateContentRequest()
    assert request.contents == []
    assert request.system_instruction is None
    assert request.tools is None
    assert request.tool_config is None
    assert request.safety_settings is None
    assert request.generation_config is None
    assert request.cached_content is None


def test_generation_config_default():
    config = GenerationConfig()
    assert config.temperature is None
    assert config.top_p is None
    assert config.top_k is None
    assert config.to_dict() == {}


def test_content_builder_methods():
    assert Content.user("User message").role == Role.USER
    assert Content.model("Model response").role == Role.MODEL
    assert Content.system("System instruction").role == Role.SYSTEM


def test_content_to_dict_uses_lowercase_role():
    assert Content.model("hi").to_dict() == {"role": "model", "parts": [{"text": "hi"}]}


def test_content_round_trip_with_all_part_kinds():
    content = Content(
        Role.USER,
        [
            TextPart("look"),
            InlineDataPart(InlineData("image/png", "aGVsbG8=")),
            FileDataPart(FileData("application/pdf", "gs://bucket/doc.pdf")),
            FunctionCallPart(FunctionCall("get_weather", {"location": "Tokyo"})),
            FunctionResponsePart(FunctionResponse("get_weather", {"temp": 21})),
        ],
    )
    data = content.to_dict()
    assert data["parts"][1] == {"inlineData": {"mimeType": "image/png", "data": "aGVsbG8="}}
    assert data["parts"][2] == {
        "fileData": {"mimeType": "application/pdf", "fileUri": "gs://bucket/doc.pdf"}
    }
    assert Content.from_dict(data) == content


def test_part_from_dict_prefers_text():
    part = part_from_dict({"text": "a", "inlineData": {"mimeType": "x/y", "data": "z"}})
    assert part == TextPart("a")


def test_part_from_dict_falls_through_invalid_text():
    part = part_from_dict({"text": 5, "fileData": {"mimeType": "x/y", "fileUri": "u"}})
    assert part == FileDataPart(FileData("x/y", "u"))


def test_part_from_dict_function_call():
    part = part_from_dict({"functionCall": {"name": "calculate", "args": {"a": 1}}})
    assert isinstance(part, FunctionCallPart)
    assert part.function_call.name == "calculate"
    assert part.function_call.args == {"a": 1}


@pytest.mark.parametrize("data", [{}, {"unknown": 1}, "text", {"inlineData": {"data": "x"}}])
def test_part_from_dict_rejects_unknown(data):
    with pytest.raises(JsonError):
        part_from_dict(data)


def test_content_from_dict_rejects_bad_role():
    with pytest.raises(JsonError):
        Content.from_dict({"role": "admin", "parts": []})


def test_generation_config_to_dict_camel_case():
    config = GenerationConfig(
        temperature=0.5,
        top_k=40,
        max_output_tokens=100,
        stop_sequences=["END"],
        response_mime_type="application/json",
    )
    assert config.to_dict() == {
        "temperature": 0.5,
        "topK": 40,
        "maxOutputTokens": 100,
        "stopSequences": ["END"],
        "responseMimeType": "application/json",
    }
    assert GenerationConfig.from_dict(config.to_dict()) == config


def test_generation_config_rejects_wrong_types():
    with pytest.raises(JsonError):
        GenerationConfig.from_dict({"topK": "many"})


def test_thinking_budget_helpers():
    base = GenerationConfig(temperature=0.2)
    assert base.with_thinking_budget(1000).to_dict()["thinkingConfig"] == {"thinkingBudget": 1000}
    assert base.with_auto_thinking().to_dict()["thinkingConfig"] == {"thinkingBudget": None}
    assert base.without_thinking().thinking_config == ThinkingConfig(0)
    assert base.thinking_config is None
    assert base.with_thinking(ThinkingConfig.with_budget(5)).temperature == 0.2


def test_thinking_budget_over_limit():
    with pytest.raises(ValueError):
        GenerationConfig().with_thinking_budget(24577)


def test_thinking_config_round_trip_through_generation_config():
    config = GenerationConfig().with_thinking_budget(500)
    assert GenerationConfig.from_dict(config.to_dict()).thinking_config == ThinkingConfig(500)


def test_function_calling_modes():
    request = GenerateContentRequest(contents=[Content.user("hi")])
    assert request.with_auto_function_calling().to_dict()["toolConfig"] == {
        "functionCallingConfig": {"mode": "AUTO"}
    }
    assert request.with_any_function_calling(["calculate"]).to_dict()["toolConfig"] == {
        "functionCallingConfig": {"mode": "ANY", "allowedFunctionNames": ["calculate"]}
    }
    assert request.with_any_function_calling().to_dict()["toolConfig"] == {
        "functionCallingConfig": {"mode": "ANY"}
    }
    assert request.without_function_calling().to_dict()["toolConfig"] == {
        "functionCallingConfig": {"mode": "NONE"}
    }
    assert request.tool_config is None


def test_request_to_dict_and_back():
    declaration = (
        FunctionBuilder("calculate")
        .description("Perform basic arithmetic operations")
        .param("a", "number", "First number", True)
        .build()
    )
    request = GenerateContentRequest(
        contents=[Content.user("Calculate 15 + 27")],
        system_instruction=Content.system("Be brief"),
        tools=[Tool.functions([declaration])],
        safety_settings=[SafetySetting(HarmCategory.HARASSMENT, HarmBlockThreshold.BLOCK_NONE)],
        generation_config=GenerationConfig(temperature=0.1),
        cached_content="cachedContents/abc",
    ).with_auto_function_calling()
    data = request.to_dict()
    assert data["safetySettings"] == [
        {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_NONE"}
    ]
    assert data["cachedContent"] == "cachedContents/abc"
    assert data["tools"][0]["functionDeclarations"][0]["name"] == "calculate"
    parsed = GenerateContentRequest.from_dict(data)
    assert parsed == request
    assert parsed.tools[0].kind is ToolKind.FUNCTION_DECLARATIONS


def test_request_from_dict_requires_contents():
    with pytest.raises(JsonError):
        GenerateContentRequest.from_dict({})


SAMPLE_RESPONSE = {
    "candidates": [
        {
            "content": {"role": "model", "parts": [{"text": "Code flows like water"}]},
            "finishReason": "STOP",
            "safetyRatings": [
                {"category": "HARM_CATEGORY_HATE_SPEECH", "probability": "NEGLIGIBLE"}
            ],
            "citationMetadata": {"citation_sources": [{"startIndex": 0, "endIndex": 4}]},
            "groundingMetadata": {"webSearchQueries": ["rust haiku"]},
        }
    ],
    "promptFeedback": {"block_reason": "SAFETY"},
    "usageMetadata": {
        "promptTokenCount": 7,
        "candidatesTokenCount": 12,
        "totalTokenCount": 19,
    },
}


def test_response_from_dict():
    response = GenerateContentResponse.from_dict(SAMPLE_RESPONSE)
    candidate = response.candidates[0]
    assert candidate.content.parts[0] == TextPart("Code flows like water")
    assert candidate.finish_reason is FinishReason.STOP
    assert candidate.safety_ratings[0].probability is HarmProbability.NEGLIGIBLE
    assert candidate.citation_metadata.citation_sources[0].end_index == 4
    assert candidate.grounding_metadata.web_search_queries == ["rust haiku"]
    assert response.prompt_feedback.block_reason is BlockReason.SAFETY
    assert response.usage_metadata == UsageMetadata(7, 12, 19)


def test_response_round_trip():
    response = GenerateContentResponse.from_dict(SAMPLE_RESPONSE)
    assert response.to_dict() == SAMPLE_RESPONSE


def test_response_requires_candidates():
    with pytest.raises(JsonError):
        GenerateContentResponse.from_dict({"usageMetadata": None})


def test_usage_metadata_requires_counts():
    with pytest.raises(JsonError):
        UsageMetadata.from_dict({"promptTokenCount": 1, "candidatesTokenCount": 2})


def test_candidate_rejects_unknown_finish_reason():
    with pytest.raises(JsonError):
        Candidate.from_dict(
            {"content": {"role": "model", "parts": []}, "finishReason": "BORED"}
        )


def test_json_schema_and_enum_schema():
    assert json_schema().to_dict() == {"type": "object", "properties": {}}
    assert enum_schema(["a", "b"]).to_dict() == {"type": "string", "enum_values": ["a", "b"]}


def test_response_schema_round_trip_nested():
    schema = ResponseSchema(
        SchemaType.OBJECT,
        properties={
            "name": ResponseSchema(SchemaType.STRING),
            "skills": ResponseSchema(
                SchemaType.ARRAY, items=ResponseSchema(SchemaType.STRING), min_items=1
            ),
        },
        required=["name"],
        property_ordering=["name", "skills"],
    )
    data = schema.to_dict()
    assert data["properties"]["skills"] == {
        "type": "array",
        "items": {"type": "string"},
        "min_items": 1,
    }
    assert ResponseSchema.from_dict(data) == schema


def test_response_schema_rejects_unknown_type():
    with pytest.raises(JsonError):
        ResponseSchema.from_dict({"type": "date"})


def test_count_tokens():
    request = CountTokensRequest([Content.user("hello")])
    assert request.to_dict() == {"contents": [{"role": "user", "parts": [{"text": "hello"}]}]}
    assert CountTokensResponse.from_dict({"totalTokens": 3}).total_tokens == 3
    with pytest.raises(JsonError):
        CountTokensResponse.from_dict({"totalTokens": "three"})