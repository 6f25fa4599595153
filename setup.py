#!/usr/bin/env python3
"""
flushkv Setup Script
====================
Allows installation of the flushkv package.

Usage:
    pip install -e .           # Development install
    pip install -e ".[test]"   # Development install with test tooling
    pip install .              # Regular install
"""

from setuptools import setup, find_packages

setup(
    name="flushkv",
    version="1.0.0",
    packages=find_packages(include=["flushkv", "flushkv.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "flushkv=flushkv.cli:main",
        ],
    },
)
