"""
Setup configuration for nichescout package.
"""

from setuptools import setup, find_packages

setup(
    name="nichescout",
    version="0.1.0",
    description="Outlier video discovery and content idea generation for YouTube niches",
    packages=find_packages(include=["nichescout", "nichescout.*"]),
    python_requires=">=3.9",
    install_requires=[
        "click>=8.1",
        "numpy>=1.24",
        "pydantic>=2.5",
        "python-dotenv>=1.0",
        "requests>=2.31",
        "tenacity>=8.2",
        "tqdm>=4.66",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
    },
    entry_points={
        "console_scripts": [
            "nichescout=nichescout.cli.main:cli",
        ],
    },
)
