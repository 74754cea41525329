#!/usr/bin/env python
"""hax-ai: natural-language Command Plans for the hax and surge CLIs."""

from setuptools import find_packages, setup

VERSION = "0.1.0"
CLASSIFIERS = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: End Users/Desktop",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "License :: OSI Approved :: MIT License",
]

DEPENDENCIES = [
    "knack>=0.11.0",
    "pyyaml>=6.0",
    "requests>=2.28.0",
    "rich>=13.0.0",
    "openai>=1.0.0",
    # prompt_toolkit for the chat loop (backslash continuation)
    "prompt_toolkit>=3.0.0",
    # Text extraction from uploaded course materials
    "pypdf>=4.0",
    "python-docx>=1.0",
    "python-pptx>=1.0",
    "openpyxl>=3.1",
]

TEST_DEPENDENCIES = [
    "pytest>=7.0",
]

setup(
    name="hax-ai",
    version=VERSION,
    description="Turn plain-language website requests into hax and surge command plans",
    long_description="Classifies what a user wants to build and emits escaped, ordered shell commands for the HAX site CLI.",
    license="MIT",
    author="HAX contributors",
    author_email="",
    classifiers=CLASSIFIERS,
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=DEPENDENCIES,
    extras_require={"test": TEST_DEPENDENCIES},
    entry_points={
        "console_scripts": [
            "hax-ai=haxai.__main__:main",
        ]
    },
)
