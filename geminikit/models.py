"""Core request and response models for the Gemini API."""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar, Union

from .errors import JsonError
from .functions import (
    FunctionCall,
    FunctionCallingConfig,
    FunctionCallingMode,
    FunctionResponse,
    Tool,
    ToolConfig,
)
from .grounding import GroundingMetadata, UrlContextMetadata
from .thinking import ThinkingConfig

_E = TypeVar("_E", bound=enum.Enum)
_T = TypeVar("_T")
_Convert = Callable[[Any, str], Any]


def _object(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise JsonError(f"expected an object for {what}")
    return data


def _req(data: Mapping[str, Any], key: str, what: str, convert: _Convert) -> Any:
    value = data.get(key)
    if value is None:
        raise JsonError(f"missing field `{key}` in {what}")
    return convert(value, key)


def _opt(data: Mapping[str, Any], key: str, convert: _Convert) -> Any:
    value = data.get(key)
    return None if value is None else convert(value, key)


def _str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise JsonError(f"field `{key}` must be a string")
    return value


def _int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise JsonError(f"field `{key}` must be an integer")
    return value


def _float(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise JsonError(f"field `{key}` must be a number")
    return float(value)


def _bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise JsonError(f"field `{key}` must be a boolean")
    return value


def _enum(enum_cls: type[_E]) -> _Convert:
    def parse(value: Any, key: str) -> _E:
        try:
            return enum_cls(value)
        except ValueError:
            raise JsonError(f"unknown {enum_cls.__name__} variant {value!r}") from None

    return parse


def _nested(parse: Callable[[Any], _T]) -> _Convert:
    return lambda value, key: parse(value)


def _list_of(convert: _Convert) -> _Convert:
    def parse(value: Any, key: str) -> list[Any]:
        if not isinstance(value, list):
            raise JsonError(f"field `{key}` must be an array")
        return [convert(item, key) for item in value]

    return parse


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def _dump(value: Any) -> Any:
    return None if value is None else value.to_dict()


def _dump_list(values: list[Any] | None) -> list[Any] | None:
    return None if values is None else [value.to_dict() for value in values]


class Role(enum.Enum):
    """Who produced a piece of content."""

    USER = "user"
    MODEL = "model"
    SYSTEM = "system"


@dataclass
class InlineData:
    """Base64-encoded data carried inside the request."""

    mime_type: str
    data: str

    def to_dict(self) -> dict[str, Any]:
        return {"mimeType": self.mime_type, "data": self.data}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InlineData:
        data = _object(data, "InlineData")
        return cls(
            mime_type=_req(data, "mimeType", "InlineData", _str),
            data=_req(data, "data", "InlineData", _str),
        )


@dataclass
class FileData:
    """A reference to a file by URI."""

    mime_type: str
    file_uri: str

    def to_dict(self) -> dict[str, Any]:
        return {"mimeType": self.mime_type, "fileUri": self.file_uri}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FileData:
        data = _object(data, "FileData")
        return cls(
            mime_type=_req(data, "mimeType", "FileData", _str),
            file_uri=_req(data, "fileUri", "FileData", _str),
        )


@dataclass
class TextPart:
    """A text part."""

    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TextPart:
        data = _object(data, "TextPart")
        return cls(text=_req(data, "text", "TextPart", _str))


@dataclass
class InlineDataPart:
    """A part holding inline data."""

    inline_data: InlineData

    def to_dict(self) -> dict[str, Any]:
        return {"inlineData": self.inline_data.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InlineDataPart:
        data = _object(data, "InlineDataPart")
        return cls(
            inline_data=_req(data, "inlineData", "InlineDataPart", _nested(InlineData.from_dict))
        )


@dataclass
class FileDataPart:
    """A part referring to a file."""

    file_data: FileData

    def to_dict(self) -> dict[str, Any]:
        return {"fileData": self.file_data.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FileDataPart:
        data = _object(data, "FileDataPart")
        return cls(file_data=_req(data, "fileData", "FileDataPart", _nested(FileData.from_dict)))


@dataclass
class FunctionCallPart:
    """A part in which the model asks for a function call."""

    function_call: FunctionCall

    def to_dict(self) -> dict[str, Any]:
        return {"functionCall": self.function_call.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FunctionCallPart:
        data = _object(data, "FunctionCallPart")
        return cls(
            function_call=_req(
                data, "functionCall", "FunctionCallPart", _nested(FunctionCall.from_dict)
            )
        )


@dataclass
class FunctionResponsePart:
    """A part carrying a function's result back to the model."""

    function_response: FunctionResponse

    def to_dict(self) -> dict[str, Any]:
        return {"functionResponse": self.function_response.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FunctionResponsePart:
        data = _object(data, "FunctionResponsePart")
        return cls(
            function_response=_req(
                data,
                "functionResponse",
                "FunctionResponsePart",
                _nested(FunctionResponse.from_dict),
            )
        )


Part = Union[TextPart, InlineDataPart, FileDataPart, FunctionCallPart, FunctionResponsePart]

_PART_TYPES = (TextPart, InlineDataPart, FileDataPart, FunctionCallPart, FunctionResponsePart)


def part_from_dict(data: Mapping[str, Any]) -> Part:
    """Read a part, trying each shape in turn: text, inline data, file, call, response."""
    data = _object(data, "Part")
    for part_type in _PART_TYPES:
        try:
            return part_type.from_dict(data)
        except JsonError:
            continue
    raise JsonError("data did not match any variant of untagged enum Part")


@dataclass
class Content:
    """A turn in a conversation: a role and its parts."""

    role: Role
    parts: list[Part] = field(default_factory=list)

    @classmethod
    def user(cls, text: str) -> Content:
        """User content holding one text part."""
        return cls(Role.USER, [TextPart(text)])

    @classmethod
    def model(cls, text: str) -> Content:
        """Model content holding one text part."""
        return cls(Role.MODEL, [TextPart(text)])

    @classmethod
    def system(cls, text: str) -> Content:
        """System content holding one text part."""
        return cls(Role.SYSTEM, [TextPart(text)])

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role.value, "parts": [part.to_dict() for part in self.parts]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Content:
        data = _object(data, "Content")
        return cls(
            role=_req(data, "role", "Content", _enum(Role)),
            parts=_req(data, "parts", "Content", _list_of(_nested(part_from_dict))),
        )


class SchemaType(enum.Enum):
    """JSON schema data types."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


@dataclass
class ResponseSchema:
    """Schema constraining structured output."""

    schema_type: SchemaType
    format: str | None = None
    description: str | None = None
    nullable: bool | None = None
    enum_values: list[str] | None = None
    properties: dict[str, ResponseSchema] | None = None
    required: list[str] | None = None
    property_ordering: list[str] | None = None
    items: ResponseSchema | None = None
    min_items: int | None = None
    max_items: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "type": self.schema_type.value,
                "format": self.format,
                "description": self.description,
                "nullable": self.nullable,
                "enum_values": self.enum_values,
                "properties": (
                    None
                    if self.properties is None
                    else {name: schema.to_dict() for name, schema in self.properties.items()}
                ),
                "required": self.required,
                "property_ordering": self.property_ordering,
                "items": _dump(self.items),
                "min_items": self.min_items,
                "max_items": self.max_items,
            }
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ResponseSchema:
        data = _object(data, "ResponseSchema")

        def parse_properties(value: Any, key: str) -> dict[str, ResponseSchema]:
            return {
                _str(name, key): cls.from_dict(schema)
                for name, schema in _object(value, key).items()
            }

        return cls(
            schema_type=_req(data, "type", "ResponseSchema", _enum(SchemaType)),
            format=_opt(data, "format", _str),
            description=_opt(data, "description", _str),
            nullable=_opt(data, "nullable", _bool),
            enum_values=_opt(data, "enum_values", _list_of(_str)),
            properties=_opt(data, "properties", parse_properties),
            required=_opt(data, "required", _list_of(_str)),
            property_ordering=_opt(data, "property_ordering", _list_of(_str)),
            items=_opt(data, "items", _nested(cls.from_dict)),
            min_items=_opt(data, "min_items", _int),
            max_items=_opt(data, "max_items", _int),
        )


def json_schema() -> ResponseSchema:
    """An object schema with no properties yet."""
    return ResponseSchema(SchemaType.OBJECT, properties={})


def enum_schema(values: Iterable[str]) -> ResponseSchema:
    """A string schema restricted to the given values."""
    return ResponseSchema(SchemaType.STRING, enum_values=list(values))


@dataclass
class GenerationConfig:
    """Settings controlling how content is generated."""

    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    candidate_count: int | None = None
    max_output_tokens: int | None = None
    stop_sequences: list[str] | None = None
    response_mime_type: str | None = None
    response_schema: ResponseSchema | None = None
    presence_penalty: float | None = None
    frequency_penalty: float | None = None
    response_logprobs: bool | None = None
    logprobs: int | None = None
    thinking_config: ThinkingConfig | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "temperature": self.temperature,
                "topP": self.top_p,
                "topK": self.top_k,
                "candidateCount": self.candidate_count,
                "maxOutputTokens": self.max_output_tokens,
                "stopSequences": self.stop_sequences,
                "responseMimeType": self.response_mime_type,
                "responseSchema": _dump(self.response_schema),
                "presencePenalty": self.presence_penalty,
                "frequencyPenalty": self.frequency_penalty,
                "responseLogprobs": self.response_logprobs,
                "logprobs": self.logprobs,
                "thinkingConfig": _dump(self.thinking_config),
            }
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GenerationConfig:
        data = _object(data, "GenerationConfig")
        return cls(
            temperature=_opt(data, "temperature", _float),
            top_p=_opt(data, "topP", _float),
            top_k=_opt(data, "topK", _int),
            candidate_count=_opt(data, "candidateCount", _int),
            max_output_tokens=_opt(data, "maxOutputTokens", _int),
            stop_sequences=_opt(data, "stopSequences", _list_of(_str)),
            response_mime_type=_opt(data, "responseMimeType", _str),
            response_schema=_opt(data, "responseSchema", _nested(ResponseSchema.from_dict)),
            presence_penalty=_opt(data, "presencePenalty", _float),
            frequency_penalty=_opt(data, "frequencyPenalty", _float),
            response_logprobs=_opt(data, "responseLogprobs", _bool),
            logprobs=_opt(data, "logprobs", _int),
            thinking_config=_opt(data, "thinkingConfig", _nested(ThinkingConfig.from_dict)),
        )

    def with_thinking(self, config: ThinkingConfig) -> GenerationConfig:
        """A copy using the given thinking configuration."""
        return dataclasses.replace(self, thinking_config=config)

    def with_thinking_budget(self, tokens: int) -> GenerationConfig:
        """A copy with an exact thinking budget."""
        return self.with_thinking(ThinkingConfig.with_budget(tokens))

    def with_auto_thinking(self) -> GenerationConfig:
        """A copy that lets the model choose its thinking budget."""
        return self.with_thinking(ThinkingConfig.auto())

    def without_thinking(self) -> GenerationConfig:
        """A copy with thinking turned off."""
        return self.with_thinking(ThinkingConfig.disabled())


class HarmCategory(enum.Enum):
    """Categories of harmful content."""

    HATE_SPEECH = "HARM_CATEGORY_HATE_SPEECH"
    DANGEROUS_CONTENT = "HARM_CATEGORY_DANGEROUS_CONTENT"
    SEXUALLY_EXPLICIT = "HARM_CATEGORY_SEXUALLY_EXPLICIT"
    HARASSMENT = "HARM_CATEGORY_HARASSMENT"


class HarmBlockThreshold(enum.Enum):
    """How readily harmful content is blocked."""

    BLOCK_NONE = "BLOCK_NONE"
    BLOCK_ONLY_HIGH = "BLOCK_ONLY_HIGH"
    BLOCK_MEDIUM_AND_ABOVE = "BLOCK_MEDIUM_AND_ABOVE"
    BLOCK_LOW_AND_ABOVE = "BLOCK_LOW_AND_ABOVE"


class HarmProbability(enum.Enum):
    """Likelihood that content is harmful."""

    NEGLIGIBLE = "NEGLIGIBLE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


@dataclass
class SafetySetting:
    """A blocking threshold for one harm category."""

    category: HarmCategory
    threshold: HarmBlockThreshold

    def to_dict(self) -> dict[str, Any]:
        return {"category": self.category.value, "threshold": self.threshold.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SafetySetting:
        data = _object(data, "SafetySetting")
        return cls(
            category=_req(data, "category", "SafetySetting", _enum(HarmCategory)),
            threshold=_req(data, "threshold", "SafetySetting", _enum(HarmBlockThreshold)),
        )


@dataclass
class SafetyRating:
    """The rated likelihood of harm in one category."""

    category: HarmCategory
    probability: HarmProbability

    def to_dict(self) -> dict[str, Any]:
        return {"category": self.category.value, "probability": self.probability.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SafetyRating:
        data = _object(data, "SafetyRating")
        return cls(
            category=_req(data, "category", "SafetyRating", _enum(HarmCategory)),
            probability=_req(data, "probability", "SafetyRating", _enum(HarmProbability)),
        )


class FinishReason(enum.Enum):
    """Why generation stopped."""

    STOP = "STOP"
    MAX_TOKENS = "MAX_TOKENS"
    SAFETY = "SAFETY"
    RECITATION = "RECITATION"
    OTHER = "OTHER"


class BlockReason(enum.Enum):
    """Why a prompt was blocked."""

    UNSPECIFIED = "BLOCKED_REASON_UNSPECIFIED"
    SAFETY = "SAFETY"
    OTHER = "OTHER"


_safety_ratings = _list_of(_nested(SafetyRating.from_dict))


@dataclass
class PromptFeedback:
    """Feedback about the prompt before generation."""

    block_reason: BlockReason | None = None
    safety_ratings: list[SafetyRating] | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "block_reason": None if self.block_reason is None else self.block_reason.value,
                "safety_ratings": _dump_list(self.safety_ratings),
            }
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PromptFeedback:
        data = _object(data, "PromptFeedback")
        return cls(
            block_reason=_opt(data, "block_reason", _enum(BlockReason)),
            safety_ratings=_opt(data, "safety_ratings", _safety_ratings),
        )


@dataclass
class UsageMetadata:
    """Token usage of a request."""

    prompt_token_count: int
    candidates_token_count: int
    total_token_count: int
    cached_content_token_count: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "promptTokenCount": self.prompt_token_count,
                "candidatesTokenCount": self.candidates_token_count,
                "totalTokenCount": self.total_token_count,
                "cachedContentTokenCount": self.cached_content_token_count,
            }
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UsageMetadata:
        data = _object(data, "UsageMetadata")
        return cls(
            prompt_token_count=_req(data, "promptTokenCount", "UsageMetadata", _int),
            candidates_token_count=_req(data, "candidatesTokenCount", "UsageMetadata", _int),
            total_token_count=_req(data, "totalTokenCount", "UsageMetadata", _int),
            cached_content_token_count=_opt(data, "cachedContentTokenCount", _int),
        )


@dataclass
class CitationSource:
    """A source cited by generated content."""

    start_index: int | None = None
    end_index: int | None = None
    uri: str | None = None
    license: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "startIndex": self.start_index,
                "endIndex": self.end_index,
                "uri": self.uri,
                "license": self.license,
            }
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CitationSource:
        data = _object(data, "CitationSource")
        return cls(
            start_index=_opt(data, "startIndex", _int),
            end_index=_opt(data, "endIndex", _int),
            uri=_opt(data, "uri", _str),
            license=_opt(data, "license", _str),
        )


@dataclass
class CitationMetadata:
    """Citations attached to a candidate."""

    citation_sources: list[CitationSource] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"citation_sources": [source.to_dict() for source in self.citation_sources]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CitationMetadata:
        data = _object(data, "CitationMetadata")
        return cls(
            citation_sources=_req(
                data,
                "citation_sources",
                "CitationMetadata",
                _list_of(_nested(CitationSource.from_dict)),
            )
        )


@dataclass
class Candidate:
    """One generated response candidate."""

    content: Content
    finish_reason: FinishReason | None = None
    safety_ratings: list[SafetyRating] | None = None
    citation_metadata: CitationMetadata | None = None
    grounding_metadata: GroundingMetadata | None = None
    url_context_metadata: UrlContextMetadata | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "content": self.content.to_dict(),
                "finishReason": None if self.finish_reason is None else self.finish_reason.value,
                "safetyRatings": _dump_list(self.safety_ratings),
                "citationMetadata": _dump(self.citation_metadata),
                "groundingMetadata": _dump(self.grounding_metadata),
                "urlContextMetadata": _dump(self.url_context_metadata),
            }
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Candidate:
        data = _object(data, "Candidate")
        return cls(
            content=_req(data, "content", "Candidate", _nested(Content.from_dict)),
            finish_reason=_opt(data, "finishReason", _enum(FinishReason)),
            safety_ratings=_opt(data, "safetyRatings", _safety_ratings),
            citation_metadata=_opt(data, "citationMetadata", _nested(CitationMetadata.from_dict)),
            grounding_metadata=_opt(
                data, "groundingMetadata", _nested(GroundingMetadata.from_dict)
            ),
            url_context_metadata=_opt(
                data, "urlContextMetadata", _nested(UrlContextMetadata.from_dict)
            ),
        )


@dataclass
class GenerateContentRequest:
    """A content generation request."""

    contents: list[Content] = field(default_factory=list)
    system_instruction: Content | None = None
    tools: list[Tool] | None = None
    tool_config: ToolConfig | None = None
    safety_settings: list[SafetySetting] | None = None
    generation_config: GenerationConfig | None = None
    cached_content: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "contents": [content.to_dict() for content in self.contents],
                "systemInstruction": _dump(self.system_instruction),
                "tools": _dump_list(self.tools),
                "toolConfig": _dump(self.tool_config),
                "safetySettings": _dump_list(self.safety_settings),
                "generationConfig": _dump(self.generation_config),
                "cachedContent": self.cached_content,
            }
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GenerateContentRequest:
        data = _object(data, "GenerateContentRequest")
        return cls(
            contents=_req(
                data, "contents", "GenerateContentRequest", _list_of(_nested(Content.from_dict))
            ),
            system_instruction=_opt(data, "systemInstruction", _nested(Content.from_dict)),
            tools=_opt(data, "tools", _list_of(_nested(Tool.from_dict))),
            tool_config=_opt(data, "toolConfig", _nested(ToolConfig.from_dict)),
            safety_settings=_opt(
                data, "safetySettings", _list_of(_nested(SafetySetting.from_dict))
            ),
            generation_config=_opt(
                data, "generationConfig", _nested(GenerationConfig.from_dict)
            ),
            cached_content=_opt(data, "cachedContent", _str),
        )

    def _with_calling(
        self, mode: FunctionCallingMode, allowed: list[str] | None = None
    ) -> GenerateContentRequest:
        config = ToolConfig(FunctionCallingConfig(mode=mode, allowed_function_names=allowed))
        return dataclasses.replace(self, tool_config=config)

    def with_auto_function_calling(self) -> GenerateContentRequest:
        """A copy in which the model decides whether to call functions."""
        return self._with_calling(FunctionCallingMode.AUTO)

    def with_any_function_calling(
        self, allowed: Iterable[str] | None = None
    ) -> GenerateContentRequest:
        """A copy in which the model must call one of the allowed functions."""
        return self._with_calling(
            FunctionCallingMode.ANY, None if allowed is None else list(allowed)
        )

    def without_function_calling(self) -> GenerateContentRequest:
        """A copy in which the model may not call functions."""
        return self._with_calling(FunctionCallingMode.NONE)


@dataclass
class GenerateContentResponse:
    """The answer to a content generation request."""

    candidates: list[Candidate] = field(default_factory=list)
    prompt_feedback: PromptFeedback | None = None
    usage_metadata: UsageMetadata | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "candidates": [candidate.to_dict() for candidate in self.candidates],
                "promptFeedback": _dump(self.prompt_feedback),
                "usageMetadata": _dump(self.usage_metadata),
            }
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GenerateContentResponse:
        data = _object(data, "GenerateContentResponse")
        return cls(
            candidates=_req(
                data,
                "candidates",
                "GenerateContentResponse",
                _list_of(_nested(Candidate.from_dict)),
            ),
            prompt_feedback=_opt(data, "promptFeedback", _nested(PromptFeedback.from_dict)),
            usage_metadata=_opt(data, "usageMetadata", _nested(UsageMetadata.from_dict)),
        )


@dataclass
class CountTokensRequest:
    """A request to count the tokens in some content."""

    contents: list[Content] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"contents": [content.to_dict() for content in self.contents]}


@dataclass
class CountTokensResponse:
    """The token count for the submitted content."""

    total_tokens: int

    def to_dict(self) -> dict[str, Any]:
        return {"totalTokens": self.total_tokens}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CountTokensResponse:
        data = _object(data, "CountTokensResponse")
        return cls(total_tokens=_req(data, "totalTokens", "CountTokensResponse", _int))