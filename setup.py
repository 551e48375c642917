"""
datastore - Write-back LRU cache over a durable key-value store

A bounded in-memory cache with least-recently-used eviction that writes
changed entries to SQLite or Redis before they leave memory.
"""

import os
import re
from setuptools import setup, find_packages

# Read the README for the long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Get package version
with open(os.path.join("datastore", "__init__.py"), "r", encoding="utf-8") as f:
    version_match = re.search(r'^__version__ = ["\']([^\"\']+)[\"\']', f.read(), re.MULTILINE)
    if version_match:
        VERSION = version_match.group(1)
    else:
        raise RuntimeError("Unable to find version string in datastore/__init__.py")

# Core dependencies
install_requires = [
    "pydantic>=2.0.0,<3.0.0",
    "orjson>=3.6.0",
    "redis>=4.3.0",
]

# Optional dependencies
extras_require = {
    # Testing
    "test": [
        "pytest>=7.0.0",
        "pytest-cov>=4.0.0",
    ],

    # Development
    "dev": [
        "pytest>=7.0.0",
        "pytest-cov>=4.0.0",
        "black>=22.0.0",
        "isort>=5.0.0",
        "mypy>=0.990",
    ],
}

setup(
    name="datastore",
    version=VERSION,
    author="DataStore Team",
    description="A write-back LRU cache in front of a durable key-value store",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*", "examples", "examples.*"]),
    package_data={
        "datastore": ["py.typed"],
    },
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require=extras_require,
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Database",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Typing :: Typed",
    ],
    keywords=[
        "cache",
        "lru",
        "write-back",
        "sqlite",
        "redis",
        "key-value",
    ],
    zip_safe=False,
)
