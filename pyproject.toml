[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "geminikit"
version = "0.1.0"
description = "Typed request and response models, tools, grounding, thinking and streaming helpers for the Gemini API"
requires-python = ">=3.10"
dependencies = []
keywords = ["gemini", "llm", "ai", "api", "models", "streaming"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["geminikit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
