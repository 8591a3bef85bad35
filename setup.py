"""
OrderGuard setup.py — Package configuration and CLI entry point.
"""

from setuptools import find_packages, setup

setup(
    name="orderguard",
    version="1.0.0",
    description="OrderGuard — record trigger runtime for bicycle order stock validation",
    packages=find_packages(include=["orderguard", "orderguard.*"]),
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "orderguard=orderguard.cli:main",
        ],
    },
    install_requires=[
        "sqlalchemy>=2.0",
        "pydantic>=2.5",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
        ],
    },
)
