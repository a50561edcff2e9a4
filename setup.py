#!/usr/bin/env python3
"""
Setup script for the Text Analysis Pipeline.

This script enables packaging the pipeline for distribution and installation
via pip or other Python package managers.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the project directory
here = Path(__file__).parent.resolve()

# Read the README file
long_description = (here / "README.md").read_text(encoding="utf-8") if (here / "README.md").exists() else ""


# Read version from the package
def get_version():
    """Get version from text_analysis/__init__.py."""
    init_file = here / "text_analysis" / "__init__.py"
    for line in init_file.read_text(encoding="utf-8").splitlines():
        if line.startswith("__version__"):
            return line.split("=", 1)[1].strip().strip('"\'')
    return "0.0.0.dev0"


# Read requirements
def get_requirements():
    """Read requirements from requirements.txt."""
    requirements_file = here / "requirements.txt"
    if requirements_file.exists():
        with open(requirements_file, "r", encoding="utf-8") as f:
            return [
                line.strip()
                for line in f
                if line.strip() and not line.startswith("#")
            ]
    return []


# Package configuration
setup(
    # Basic package information
    name="text-analysis-pipeline",
    version=get_version(),
    description="Structural text analysis pipeline: statistics, keywords, entities, chunking and meaning trees",
    long_description=long_description,
    long_description_content_type="text/markdown",

    # Package discovery
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],

    # Dependencies
    python_requires=">=3.11",
    install_requires=get_requirements(),

    # Optional dependencies
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "mypy>=1.0.0",
            "ruff>=0.1.0",
        ],
    },

    # Entry points
    entry_points={
        "console_scripts": [
            "text-analysis=text_analysis.cli:main",
        ],
    },

    # Classification
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Text Processing :: Linguistic",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: POSIX",
    ],

    keywords="text analysis nlp keywords readability chunking",

    license="MIT",
    zip_safe=False,
)
