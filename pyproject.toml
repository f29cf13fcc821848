[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "paysplit"
version = "0.1.0"
description = "Cryptographic building blocks for private payment splitting: distributed point functions, sketch checks, Beaver-triple MPC and keyed-verification credentials"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = [
    "dpf",
    "distributed point function",
    "mpc",
    "beaver triples",
    "ristretto255",
    "anonymous credentials",
    "zero knowledge",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["paysplit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
