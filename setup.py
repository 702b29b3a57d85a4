#!/usr/bin/env python3
"""
Setup script for modulefor.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

setup(
    name="modulefor",
    version="0.1.0",
    description="Per-test dependency injection and lifecycle harness for async test suites",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="modulefor Contributors",
    packages=find_packages(include=["modulefor", "modulefor.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "python-dotenv>=1.0.0",
        "PyYAML>=6.0",
        "pytest>=7.4.0",
    ],
    extras_require={
        "dev": [
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.1.0",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Framework :: Pytest",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Testing",
    ],
    keywords="testing dependency-injection lifecycle pytest asyncio",
)
