# geminikit

Plain-Python building blocks for working with the Gemini generative-language API.
The package provides:

- request and response models that convert to and from the API's JSON shape
- function-calling tools
- search and URL-context grounding
- thinking budgets
- parsing of streamed responses
- a small error hierarchy with retry hints

The package has no runtime dependencies.

## What it does not do

geminikit contains no HTTP client. It does not send requests, retry them, read
API keys from the environment or manage cached content. You pick the HTTP
client and make the calls. geminikit builds the JSON you send and reads the
JSON you get back. It also turns error replies into exceptions and suggests
retry delays.

## Installation

```
pip install geminikit
```

## Modules

- `geminikit.models`: content, parts, generation settings, safety settings, requests and responses.
- `geminikit.functions`: function declarations, tools and function-calling modes.
- `geminikit.grounding`: grounding settings and the metadata returned with grounded answers.
- `geminikit.thinking`: thinking budgets and budget estimation.
- `geminikit.streaming`: parsing and joining streamed responses.
- `geminikit.errors`: exceptions.

## Building a request

```python
import json

from geminikit.models import Content, GenerateContentRequest, GenerationConfig

config = GenerationConfig(temperature=0.7).with_thinking_budget(1024)
request = GenerateContentRequest(
    contents=[Content.user("Write a haiku about type checkers")],
    generation_config=config,
)
body = json.dumps(request.to_dict())
```

`Content.user`, `Content.model` and `Content.system` each create content that
holds one `TextPart`.

In `to_dict()`, optional fields that are unset are left out. Most keys use the
API's camelCase names.

The `with_thinking*`, `without_thinking` and `with_*_function_calling` helpers
return changed copies. The original object is left as it was.

## Reading a response

```python
from geminikit.models import GenerateContentResponse, TextPart

response = GenerateContentResponse.from_dict(payload)
first = response.candidates[0].content.parts[0]
if isinstance(first, TextPart):
    print(first.text)
```

A part is one of `TextPart`, `InlineDataPart`, `FileDataPart`,
`FunctionCallPart` or `FunctionResponsePart`. `part_from_dict` tries the types
in that order.

`from_dict` methods raise `geminikit.errors.JsonError` in these cases:

- a required field is missing
- a field has the wrong type
- an enum value is unknown

## Structured output

```python
from geminikit.models import GenerationConfig, enum_schema, json_schema

config = GenerationConfig(
    response_mime_type="text/x.enum",
    response_schema=enum_schema(["positive", "negative", "neutral"]),
)
```

`json_schema()` returns an object `ResponseSchema` with an empty `properties`
dictionary, ready to be filled in.

## Function calling

```python
from geminikit.functions import FunctionBuilder, Tool
from geminikit.models import Content, GenerateContentRequest

calculate = (
    FunctionBuilder("calculate")
    .description("Perform basic arithmetic operations")
    .param("operation", "string", "add, subtract, multiply or divide", True)
    .param("a", "number", "First number", True)
    .param("b", "number", "Second number", True)
    .build()
)

request = GenerateContentRequest(
    contents=[Content.user("Calculate 15 + 27")],
    tools=[Tool.functions([calculate])],
).with_auto_function_calling()
```

`FunctionBuilder.enum_param` adds a string parameter that may only take the
listed values.

Two other helpers set the remaining calling modes:

- `with_any_function_calling(allowed)`, where `allowed` is an optional list of function names
- `without_function_calling()`

`Tool.code_execution()` creates a code-execution tool. `Tool.kind` holds a
`ToolKind` value.

## Grounding

```python
from geminikit.functions import Tool
from geminikit.grounding import GroundingBuilder

grounding = GroundingBuilder().with_dynamic_search(0.3).with_url_context().max_urls(5).build()
tools = Tool.from_grounding(grounding)
```

`GroundingBuilder.build()` returns `None` if nothing was enabled.

`max_urls` has no effect unless URL context was enabled first.

`Tool.from_grounding` returns the search tool first and the URL-context tool
second.

`Tool.google_search()` and `Tool.url_context()` create these tools with
default settings.

A candidate's `grounding_metadata` and `url_context_metadata` are read into
`GroundingMetadata` and `UrlContextMetadata`.

## Thinking budgets

```python
from geminikit.thinking import TaskComplexity, ThinkingConfig, estimate_thinking_budget

budget = estimate_thinking_budget("Explain step by step why the sky is blue", TaskComplexity.COMPLEX)
config = ThinkingConfig.with_budget(budget)
```

Each `TaskComplexity` value sets a base budget:

| Value          | Base budget (tokens) |
|----------------|----------------------|
| `SIMPLE`       | 0                    |
| `MODERATE`     | 512                  |
| `COMPLEX`      | 2048                 |
| `VERY_COMPLEX` | 8192                 |

`estimate_thinking_budget` adjusts the base budget in three steps:

1. If the prompt contains "step by step", "analyze" or "explain", the base is multiplied by 1.5.
2. 256 tokens are added for every full 100 words of the prompt.
3. The result is capped at 24576.

`ThinkingConfig.with_budget` raises `ValueError` if the budget is negative, is
not an integer, or is above 24576.

`ThinkingConfig.auto()` leaves the budget to the model.
`ThinkingConfig.disabled()` sets the budget to 0.

## Streaming

`parse_stream` accepts an iterable of chunks from a streamed
`streamGenerateContent` reply. Each chunk can be bytes or str.

It yields `GenerateContentResponse` objects as follows:

- Chunks are added to a buffer as they arrive.
- After each chunk, at most one complete JSON object is taken from the front of the buffer and yielded.
- When the chunks run out, any data left in the buffer is yielded as one last response if it parses. Otherwise it is ignored.
- A malformed object raises `JsonError`.
- An exception from the chunk source is raised again as `StreamingError`.

`StreamAccumulator` collects the leading text of each response:

```python
from geminikit.streaming import StreamAccumulator, parse_stream

accumulator = StreamAccumulator()
for chunk in parse_stream(byte_chunks):
    piece = accumulator.process_chunk(chunk)
    if piece:
        print(piece, end="")
final = accumulator.finalize()
```

`accumulator.accumulated_text` holds all text collected so far.

`finalize()` returns a copy of the last response, with its leading text part
replaced by the collected text. It returns `None` if no response was processed.

`accumulate_text` yields the leading text of each response. Responses without
text are skipped.

## Errors

Every error derives from `geminikit.errors.GeminiError`. Each error has two helpers:

- `is_retryable()`
- `retry_delay()`, which returns a delay in seconds, or `None`.

These errors are retryable:

- `HttpError`
- `RateLimitError`
- `GeminiTimeoutError`
- `ApiError` with a 5xx status

`ApiError` suggests a retry delay for two statuses:

- 60 seconds for status 429
- 5 seconds for 5xx statuses

`api_error_from_response(status, body)` turns an error reply into an exception:

- Status 429 gives a `RateLimitError`. Its `retry_after` comes from a `retryAfter` field in the JSON body, if there is one.
- Any other status gives an `ApiError`. Its message is taken from `error.message` in the JSON body if present, and is the raw body otherwise.

## Running the tests

```
pip install -e ".[test]"
pytest
```