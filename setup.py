#!/usr/bin/env python3
"""
Setup script for the Thermoutil Kernels library

Builds the pure-Python package of numerically robust summation, sorting
and transition matrix kernels used by thermodynamic estimators.
"""

from pathlib import Path
from setuptools import setup, find_packages

# Package metadata
PACKAGE_NAME = "thermoutil"
VERSION = "1.0.0"
DESCRIPTION = "Stable summation, log-sum-exp and transition matrix kernels for thermodynamic estimators"
AUTHOR = "Thermoutil Contributors"
LICENSE = "LGPL-3.0-or-later"

# Read long description from README
def read_readme():
    readme_path = Path(__file__).parent / "README.md"
    if readme_path.exists():
        with open(readme_path, "r", encoding="utf-8") as f:
            return f.read()
    return DESCRIPTION

# Package requirements
def get_requirements():
    """Get package requirements."""
    base_requirements = [
        "numpy>=1.19.0",
        "torch>=1.9.0",
    ]

    dev_requirements = [
        "pytest>=6.0",
        "pytest-cov>=2.0",
    ]

    return {
        "base": base_requirements,
        "dev": dev_requirements,
    }

# Setup configuration
def main():
    """Main setup function."""
    requirements = get_requirements()

    setup(
        name=PACKAGE_NAME,
        version=VERSION,
        description=DESCRIPTION,
        long_description=read_readme(),
        long_description_content_type="text/markdown",
        author=AUTHOR,
        license=LICENSE,

        # Package configuration
        packages=find_packages(include=["thermoutil", "thermoutil.*"]),

        # Dependencies
        install_requires=requirements["base"],
        extras_require={
            "dev": requirements["dev"],
            "test": requirements["dev"],
        },
        python_requires=">=3.8",

        # Metadata for PyPI
        classifiers=[
            "Development Status :: 5 - Production/Stable",
            "Intended Audience :: Science/Research",
            "Intended Audience :: Developers",
            "License :: OSI Approved :: GNU Lesser General Public License v3 or later (LGPLv3+)",
            "Programming Language :: Python :: 3",
            "Programming Language :: Python :: 3.8",
            "Programming Language :: Python :: 3.9",
            "Programming Language :: Python :: 3.10",
            "Programming Language :: Python :: 3.11",
            "Programming Language :: Python :: 3.12",
            "Topic :: Scientific/Engineering :: Mathematics",
            "Topic :: Scientific/Engineering :: Chemistry",
            "Topic :: Software Development :: Libraries :: Python Modules",
            "Operating System :: OS Independent",
        ],
        keywords=[
            "numerical", "summation", "kahan", "logsumexp", "floating-point",
            "markov-state-model", "transition-matrix", "scientific-computing"
        ],

        zip_safe=False,
    )

if __name__ == "__main__":
    main()
