[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "authkv"
version = "0.1.0"
description = "Authenticated key-value stores with Merkle commitments and lookup proofs"
requires-python = ">=3.10"
dependencies = []
keywords = ["merkle", "authenticated data structures", "sparse merkle tree", "sha256", "proofs"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["authkv"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
