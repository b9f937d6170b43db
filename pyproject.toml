[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hermesadmit"
version = "0.1.0"
description = "Admission checks, cluster defaulting and workspace ConfigMap building for Hermes agent instances"
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "admission", "validation", "defaulting", "configmap"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["hermesadmit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
