"""
Setup configuration for the surrogate thermal-hydraulics library.
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="surrogate-th",
    version="1.0.0",
    author="Nuclear Sim Team",
    description="Reduced-order thermal-hydraulics surrogate for coupled pin bundle simulations",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["*.tests"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.19.0",
        "pydantic>=2.0",
        "pyyaml>=5.4",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov>=2.10",
        ],
    },
    entry_points={
        "console_scripts": [
            "surrogate-th=surrogate_th.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
