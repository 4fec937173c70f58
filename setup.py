"""
Setup script for the ulti-stats package.

Installs the ``ulti_stats`` package from ``src/`` together with its
SQLite schema, and the ``ulti-stats`` console script.
"""

from setuptools import setup, find_packages

setup(
    name="ulti-stats",
    version="1.0.0",
    description="Live game scorekeeping and tournament stats for ultimate tournaments",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "dev": [
            "pytest>=7.0",
            "build",
            "wheel",
        ],
    },
    package_data={
        "ulti_stats._store": ["schema.sql"],
    },
    entry_points={
        "console_scripts": [
            "ulti-stats=ulti_stats.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
