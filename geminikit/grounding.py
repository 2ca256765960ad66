"""Grounding with search and URL context, and the metadata it returns."""

from __future__ import annotations

import enum
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

from .errors import JsonError

_E = TypeVar("_E", bound=enum.Enum)
_T = TypeVar("_T")


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise JsonError(f"expected an object for {what}")
    return data


def _required(data: Mapping[str, Any], key: str, what: str) -> Any:
    value = data.get(key)
    if value is None:
        raise JsonError(f"missing field `{key}` in {what}")
    return value


def _string(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise JsonError(f"field `{key}` must be a string")
    return value


def _enum_value(enum_cls: type[_E], value: Any) -> _E:
    try:
        return enum_cls(value)
    except ValueError:
        raise JsonError(f"unknown {enum_cls.__name__} variant {value!r}") from None


def _optional(data: Mapping[str, Any], key: str, convert: Callable[[Any], _T]) -> _T | None:
    value = data.get(key)
    return None if value is None else convert(value)


def _list_of(value: Any, key: str, convert: Callable[[Any], _T]) -> list[_T]:
    if not isinstance(value, list):
        raise JsonError(f"field `{key}` must be an array")
    return [convert(item) for item in value]


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


class DynamicRetrievalMode(enum.Enum):
    """How dynamic retrieval decides whether to ground."""

    MODE_UNSPECIFIED = "MODE_UNSPECIFIED"
    MODE_DYNAMIC = "MODE_DYNAMIC"


@dataclass
class DynamicRetrievalConfig:
    """Dynamic retrieval settings for search grounding."""

    mode: DynamicRetrievalMode
    dynamic_threshold: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({"mode": self.mode.value, "dynamic_threshold": self.dynamic_threshold})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DynamicRetrievalConfig:
        data = _mapping(data, "DynamicRetrievalConfig")
        return cls(
            mode=_enum_value(DynamicRetrievalMode, _required(data, "mode", "DynamicRetrievalConfig")),
            dynamic_threshold=_optional(data, "dynamic_threshold", float),
        )


@dataclass
class SearchGrounding:
    """Google Search grounding settings."""

    dynamic_retrieval_config: DynamicRetrievalConfig | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.dynamic_retrieval_config is None:
            return {}
        return {"dynamic_retrieval_config": self.dynamic_retrieval_config.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SearchGrounding:
        data = _mapping(data, "SearchGrounding")
        return cls(
            dynamic_retrieval_config=_optional(
                data, "dynamic_retrieval_config", DynamicRetrievalConfig.from_dict
            )
        )


@dataclass
class UrlContext:
    """URL context settings."""

    max_urls: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({"max_urls": self.max_urls})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UrlContext:
        data = _mapping(data, "UrlContext")
        return cls(max_urls=_optional(data, "max_urls", int))


@dataclass
class GroundingConfig:
    """Search grounding, URL context, or both."""

    search: SearchGrounding | None = None
    url_context: UrlContext | None = None

    def __post_init__(self) -> None:
        if self.search is None and self.url_context is None:
            raise ValueError("a grounding configuration needs search or URL context")

    @property
    def is_combined(self) -> bool:
        return self.search is not None and self.url_context is not None

    def to_dict(self) -> dict[str, Any]:
        if self.search is not None and self.url_context is not None:
            return {"search": self.search.to_dict(), "url_context": self.url_context.to_dict()}
        if self.search is not None:
            return self.search.to_dict()
        assert self.url_context is not None
        return self.url_context.to_dict()


@dataclass
class SearchEntryPoint:
    """Rendered search suggestions."""

    rendered_content: str

    def to_dict(self) -> dict[str, Any]:
        return {"renderedContent": self.rendered_content}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SearchEntryPoint:
        data = _mapping(data, "SearchEntryPoint")
        return cls(
            rendered_content=_string(
                _required(data, "renderedContent", "SearchEntryPoint"), "renderedContent"
            )
        )


@dataclass
class WebSource:
    """A web page used for grounding."""

    uri: str
    title: str
    domain: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({"uri": self.uri, "title": self.title, "domain": self.domain})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WebSource:
        data = _mapping(data, "WebSource")
        return cls(
            uri=_string(_required(data, "uri", "WebSource"), "uri"),
            title=_string(_required(data, "title", "WebSource"), "title"),
            domain=_optional(data, "domain", lambda value: _string(value, "domain")),
        )


@dataclass
class GroundingChunk:
    """A chunk of grounding information."""

    web: WebSource | None = None

    def to_dict(self) -> dict[str, Any]:
        return {} if self.web is None else {"web": self.web.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GroundingChunk:
        data = _mapping(data, "GroundingChunk")
        return cls(web=_optional(data, "web", WebSource.from_dict))


@dataclass
class TextSegment:
    """A span of response text that was grounded."""

    text: str
    start_index: int | None = None
    end_index: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {"startIndex": self.start_index, "endIndex": self.end_index, "text": self.text}
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TextSegment:
        data = _mapping(data, "TextSegment")
        return cls(
            text=_string(_required(data, "text", "TextSegment"), "text"),
            start_index=_optional(data, "startIndex", int),
            end_index=_optional(data, "endIndex", int),
        )


@dataclass
class GroundingSupport:
    """Links a text segment to the chunks that support it."""

    segment: TextSegment | None = None
    grounding_chunk_indices: list[int] | None = None
    confidence_scores: list[float] | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "segment": None if self.segment is None else self.segment.to_dict(),
                "groundingChunkIndices": self.grounding_chunk_indices,
                "confidenceScores": self.confidence_scores,
            }
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GroundingSupport:
        data = _mapping(data, "GroundingSupport")
        return cls(
            segment=_optional(data, "segment", TextSegment.from_dict),
            grounding_chunk_indices=_optional(
                data, "groundingChunkIndices", lambda v: _list_of(v, "groundingChunkIndices", int)
            ),
            confidence_scores=_optional(
                data, "confidenceScores", lambda v: _list_of(v, "confidenceScores", float)
            ),
        )


@dataclass
class GroundingMetadata:
    """Metadata returned with a grounded response."""

    web_search_queries: list[str] | None = None
    search_entry_point: SearchEntryPoint | None = None
    grounding_chunks: list[GroundingChunk] | None = None
    grounding_supports: list[GroundingSupport] | None = None
    retrieval_metadata: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "webSearchQueries": self.web_search_queries,
                "searchEntryPoint": (
                    None if self.search_entry_point is None else self.search_entry_point.to_dict()
                ),
                "groundingChunks": (
                    None
                    if self.grounding_chunks is None
                    else [chunk.to_dict() for chunk in self.grounding_chunks]
                ),
                "groundingSupports": (
                    None
                    if self.grounding_supports is None
                    else [support.to_dict() for support in self.grounding_supports]
                ),
                "retrievalMetadata": self.retrieval_metadata,
            }
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GroundingMetadata:
        data = _mapping(data, "GroundingMetadata")
        return cls(
            web_search_queries=_optional(
                data,
                "webSearchQueries",
                lambda v: _list_of(v, "webSearchQueries", lambda q: _string(q, "webSearchQueries")),
            ),
            search_entry_point=_optional(data, "searchEntryPoint", SearchEntryPoint.from_dict),
            grounding_chunks=_optional(
                data, "groundingChunks", lambda v: _list_of(v, "groundingChunks", GroundingChunk.from_dict)
            ),
            grounding_supports=_optional(
                data,
                "groundingSupports",
                lambda v: _list_of(v, "groundingSupports", GroundingSupport.from_dict),
            ),
            retrieval_metadata=_optional(
                data, "retrievalMetadata", lambda v: dict(_mapping(v, "retrievalMetadata"))
            ),
        )


class UrlRetrievalStatus(enum.Enum):
    """Outcome of fetching a URL for context."""

    SUCCESS = "URL_RETRIEVAL_STATUS_SUCCESS"
    ERROR = "URL_RETRIEVAL_STATUS_ERROR"
    UNREACHABLE = "URL_RETRIEVAL_STATUS_UNREACHABLE"


@dataclass
class UrlMetadata:
    """A URL that was processed for context."""

    retrieved_url: str
    url_retrieval_status: UrlRetrievalStatus

    def to_dict(self) -> dict[str, Any]:
        return {
            "retrievedUrl": self.retrieved_url,
            "urlRetrievalStatus": self.url_retrieval_status.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UrlMetadata:
        data = _mapping(data, "UrlMetadata")
        return cls(
            retrieved_url=_string(_required(data, "retrievedUrl", "UrlMetadata"), "retrievedUrl"),
            url_retrieval_status=_enum_value(
                UrlRetrievalStatus, _required(data, "urlRetrievalStatus", "UrlMetadata")
            ),
        )


@dataclass
class UrlContextMetadata:
    """Metadata about URLs used as context."""

    url_metadata: list[UrlMetadata] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"urlMetadata": [entry.to_dict() for entry in self.url_metadata]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UrlContextMetadata:
        data = _mapping(data, "UrlContextMetadata")
        return cls(
            url_metadata=_list_of(
                _required(data, "urlMetadata", "UrlContextMetadata"),
                "urlMetadata",
                UrlMetadata.from_dict,
            )
        )


class GroundingBuilder:
    """Fluent builder for a grounding configuration."""

    def __init__(self) -> None:
        self.search: SearchGrounding | None = None
        self.url_context: UrlContext | None = None

    def with_search(self) -> GroundingBuilder:
        """Enable Google Search grounding."""
        self.search = SearchGrounding()
        return self

    def with_dynamic_search(self, threshold: float) -> GroundingBuilder:
        """Enable Google Search grounding with dynamic retrieval."""
        self.search = SearchGrounding(
            dynamic_retrieval_config=DynamicRetrievalConfig(
                mode=DynamicRetrievalMode.MODE_DYNAMIC, dynamic_threshold=threshold
            )
        )
        return self

    def with_url_context(self) -> GroundingBuilder:
        """Enable URL context."""
        self.url_context = UrlContext()
        return self

    def max_urls(self, max_urls: int) -> GroundingBuilder:
        """Limit the URLs processed; has no effect unless URL context is enabled."""
        if self.url_context is not None:
            self.url_context.max_urls = max_urls
        return self

    def build(self) -> GroundingConfig | None:
        """The configuration, or None when nothing was enabled."""
        if self.search is None and self.url_context is None:
            return None
        return GroundingConfig(search=self.search, url_context=self.url_context)