[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "benchjson"
version = "0.1.0"
description = "Write benchmark run results and machine context as a streaming JSON report"
requires-python = ">=3.10"
dependencies = []
keywords = ["benchmark", "json", "reporter", "performance"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Testing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["benchjson"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
