[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "roxy"
version = "0.1.0"
description = "Asyncio components for an Ethereum JSON-RPC proxy: HTTP backends, load balancing, failover, health tracking and caching"
requires-python = ">=3.10"
keywords = ["ethereum", "json-rpc", "proxy", "load-balancer", "cache", "asyncio"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Internet :: Proxy Servers",
]
dependencies = [
    "brotli",
    "redis",
    "httpx",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["roxy"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
