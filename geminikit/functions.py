"""Function calling: tool declarations, calls, responses and calling modes."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import JsonError
from .grounding import GroundingConfig, SearchGrounding, UrlContext

_MISSING = object()


def _as_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise JsonError(f"expected an object for {what}")
    return data


def _get_required(data: Mapping[str, Any], key: str, what: str) -> Any:
    value = data.get(key, _MISSING)
    if value is _MISSING or value is None:
        raise JsonError(f"missing field `{key}` in {what}")
    return value


def _as_string(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise JsonError(f"field `{key}` must be a string")
    return value


def _as_string_list(value: Any, key: str) -> list[str]:
    if not isinstance(value, list):
        raise JsonError(f"field `{key}` must be an array")
    return [_as_string(item, key) for item in value]


def _optional_string_list(data: Mapping[str, Any], key: str) -> list[str] | None:
    value = data.get(key)
    return None if value is None else _as_string_list(value, key)


def _without_none(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


@dataclass
class PropertySchema:
    """Schema of a single function parameter."""

    property_type: str
    description: str | None = None
    enum_values: list[str] | None = None
    items: PropertySchema | None = None

    def to_dict(self) -> dict[str, Any]:
        return _without_none(
            {
                "type": self.property_type,
                "description": self.description,
                "enum_values": self.enum_values,
                "items": None if self.items is None else self.items.to_dict(),
            }
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PropertySchema:
        data = _as_mapping(data, "PropertySchema")
        description = data.get("description")
        items = data.get("items")
        return cls(
            property_type=_as_string(_get_required(data, "type", "PropertySchema"), "type"),
            description=None if description is None else _as_string(description, "description"),
            enum_values=_optional_string_list(data, "enum_values"),
            items=None if items is None else cls.from_dict(items),
        )


@dataclass
class ParameterSchema:
    """Object schema describing all parameters of a function."""

    properties: dict[str, PropertySchema] = field(default_factory=dict)
    required: list[str] | None = None
    schema_type: str = "object"

    def to_dict(self) -> dict[str, Any]:
        return _without_none(
            {
                "type": self.schema_type,
                "properties": {name: prop.to_dict() for name, prop in self.properties.items()},
                "required": self.required,
            }
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ParameterSchema:
        data = _as_mapping(data, "ParameterSchema")
        properties = _as_mapping(
            _get_required(data, "properties", "ParameterSchema"), "properties"
        )
        return cls(
            properties={
                _as_string(name, "properties"): PropertySchema.from_dict(prop)
                for name, prop in properties.items()
            },
            required=_optional_string_list(data, "required"),
            schema_type=_as_string(_get_required(data, "type", "ParameterSchema"), "type"),
        )


@dataclass
class FunctionDeclaration:
    """A function the model may call."""

    name: str
    description: str
    parameters: ParameterSchema

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FunctionDeclaration:
        data = _as_mapping(data, "FunctionDeclaration")
        return cls(
            name=_as_string(_get_required(data, "name", "FunctionDeclaration"), "name"),
            description=_as_string(
                _get_required(data, "description", "FunctionDeclaration"), "description"
            ),
            parameters=ParameterSchema.from_dict(
                _get_required(data, "parameters", "FunctionDeclaration")
            ),
        )


@dataclass
class FunctionCall:
    """A call the model asks the caller to perform."""

    name: str
    args: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "args": dict(self.args)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FunctionCall:
        data = _as_mapping(data, "FunctionCall")
        args = _as_mapping(_get_required(data, "args", "FunctionCall"), "args")
        return cls(
            name=_as_string(_get_required(data, "name", "FunctionCall"), "name"),
            args=dict(args),
        )


@dataclass
class FunctionResponse:
    """The result of a function call, sent back to the model."""

    name: str
    response: Any

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "response": self.response}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FunctionResponse:
        data = _as_mapping(data, "FunctionResponse")
        if "response" not in data:
            raise JsonError("missing field `response` in FunctionResponse")
        return cls(
            name=_as_string(_get_required(data, "name", "FunctionResponse"), "name"),
            response=data["response"],
        )


class ToolKind(enum.Enum):
    """The kinds of tool a request can offer."""

    FUNCTION_DECLARATIONS = "function_declarations"
    GOOGLE_SEARCH = "google_search"
    URL_CONTEXT = "url_context"
    CODE_EXECUTION = "code_execution"


@dataclass
class Tool:
    """A tool made available to the model."""

    kind: ToolKind
    function_declarations: list[FunctionDeclaration] = field(default_factory=list)
    search: SearchGrounding | None = None
    url_context: UrlContext | None = None

    def __post_init__(self) -> None:
        if self.kind is ToolKind.GOOGLE_SEARCH and self.search is None:
            self.search = SearchGrounding()
        if self.kind is ToolKind.URL_CONTEXT and self.url_context is None:
            self.url_context = UrlContext()

    @classmethod
    def functions(cls, declarations: Iterable[FunctionDeclaration]) -> Tool:
        """A tool offering the given function declarations."""
        return cls(ToolKind.FUNCTION_DECLARATIONS, function_declarations=list(declarations))

    @classmethod
    def google_search(cls) -> Tool:
        """A Google Search tool with default settings."""
        return cls(ToolKind.GOOGLE_SEARCH, search=SearchGrounding())

    @classmethod
    def url_context(cls) -> Tool:  # type: ignore[override]
        """A URL context tool with default settings."""
        return cls(ToolKind.URL_CONTEXT, url_context=UrlContext())

    @classmethod
    def code_execution(cls) -> Tool:
        """A code execution tool."""
        return cls(ToolKind.CODE_EXECUTION)

    @classmethod
    def from_grounding(cls, config: GroundingConfig) -> list[Tool]:
        """The tools that implement a grounding configuration, search first."""
        tools: list[Tool] = []
        if config.search is not None:
            tools.append(cls(ToolKind.GOOGLE_SEARCH, search=config.search))
        if config.url_context is not None:
            tools.append(cls(ToolKind.URL_CONTEXT, url_context=config.url_context))
        return tools

    def to_dict(self) -> dict[str, Any]:
        if self.kind is ToolKind.FUNCTION_DECLARATIONS:
            return {
                "functionDeclarations": [decl.to_dict() for decl in self.function_declarations]
            }
        if self.kind is ToolKind.GOOGLE_SEARCH:
            assert self.search is not None
            return self.search.to_dict()
        if self.kind is ToolKind.URL_CONTEXT:
            assert self.url_context is not None
            return self.url_context.to_dict()
        return {"codeExecution": {}}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Tool:
        """Read a tool, trying each shape in declaration order.

        The search and URL context shapes have only optional fields, so any
        object without a valid function declaration list reads as a search tool.
        """
        data = _as_mapping(data, "Tool")
        if "functionDeclarations" in data:
            try:
                declarations = data["functionDeclarations"]
                if not isinstance(declarations, list):
                    raise JsonError("field `functionDeclarations` must be an array")
                return cls.functions(FunctionDeclaration.from_dict(d) for d in declarations)
            except (JsonError, TypeError, ValueError):
                pass
        try:
            return cls(ToolKind.GOOGLE_SEARCH, search=SearchGrounding.from_dict(data))
        except (JsonError, TypeError, ValueError):
            pass
        try:
            return cls(ToolKind.URL_CONTEXT, url_context=UrlContext.from_dict(data))
        except (JsonError, TypeError, ValueError):
            pass
        if isinstance(data.get("codeExecution"), Mapping):
            return cls.code_execution()
        raise JsonError("data did not match any variant of untagged enum Tool")


class FunctionCallingMode(enum.Enum):
    """Whether and how the model may call functions."""

    AUTO = "AUTO"
    ANY = "ANY"
    NONE = "NONE"


@dataclass
class FunctionCallingConfig:
    """Function calling mode and an optional allow-list of function names."""

    mode: FunctionCallingMode
    allowed_function_names: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        return _without_none(
            {"mode": self.mode.value, "allowedFunctionNames": self.allowed_function_names}
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FunctionCallingConfig:
        data = _as_mapping(data, "FunctionCallingConfig")
        mode = _get_required(data, "mode", "FunctionCallingConfig")
        try:
            parsed_mode = FunctionCallingMode(mode)
        except ValueError:
            raise JsonError(f"unknown FunctionCallingMode variant {mode!r}") from None
        return cls(
            mode=parsed_mode,
            allowed_function_names=_optional_string_list(data, "allowedFunctionNames"),
        )


@dataclass
class ToolConfig:
    """Controls function calling behaviour for a request."""

    function_calling_config: FunctionCallingConfig | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.function_calling_config is None:
            return {}
        return {"functionCallingConfig": self.function_calling_config.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ToolConfig:
        data = _as_mapping(data, "ToolConfig")
        config = data.get("functionCallingConfig")
        return cls(
            function_calling_config=(
                None if config is None else FunctionCallingConfig.from_dict(config)
            )
        )


class FunctionBuilder:
    """Fluent builder for a function declaration."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._description = ""
        self._parameters: dict[str, PropertySchema] = {}
        self._required: list[str] = []

    def description(self, desc: str) -> FunctionBuilder:
        """Set the function's description."""
        self._description = desc
        return self

    def param(
        self, name: str, param_type: str, description: str, required: bool
    ) -> FunctionBuilder:
        """Add a parameter of the given type."""
        self._parameters[name] = PropertySchema(property_type=param_type, description=description)
        if required:
            self._required.append(name)
        return self

    def enum_param(
        self, name: str, values: Iterable[str], description: str, required: bool
    ) -> FunctionBuilder:
        """Add a string parameter restricted to the given values."""
        self._parameters[name] = PropertySchema(
            property_type="string", description=description, enum_values=list(values)
        )
        if required:
            self._required.append(name)
        return self

    def build(self) -> FunctionDeclaration:
        """The finished declaration."""
        return FunctionDeclaration(
            name=self.name,
            description=self._description,
            parameters=ParameterSchema(
                properties=dict(self._parameters),
                required=list(self._required) or None,
            ),
        )