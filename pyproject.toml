[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kmerwin"
version = "0.1.0"
description = "Random minimizers of DNA sequences: k-mer hashing, sliding window minima and minimizer schemes"
requires-python = ">=3.10"
dependencies = []
keywords = ["minimizers", "k-mer", "dna", "bioinformatics", "sliding-window", "nthash"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[project.scripts]
kmerwin-count = "kmerwin.counting:main"

[tool.hatch.build.targets.wheel]
packages = ["kmerwin"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
