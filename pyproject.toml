[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "zkgadgets"
version = "0.1.0"
description = "Rank-1 constraint system gadgets and radix-2 polynomial domains over the BLS12-381 scalar field"
requires-python = ">=3.10"
dependencies = []
keywords = ["zk-snark", "r1cs", "constraint-system", "fft", "bls12-381", "gadgets"]
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
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["zkgadgets"]

[tool.pytest.ini_options]
addopts = "-ra"
