#!/usr/bin/env python3
from setuptools import find_packages, setup
import re

__version__ = re.search(
    r'__version__\s*=\s*[\'"]([^\'"]*)[\'"]', open("src/skrca/_version.py").read()
).group(1)

if __name__ == "__main__":
    setup(
        name="scikit-rca",
        version=__version__,
        description="Relevant Component Analysis following the scikit-learn API",
        license="BSD-3-Clause",
        package_dir={"": "src"},
        packages=find_packages("src"),
        python_requires=">=3.9",
        install_requires=[
            "numpy",
            "scipy",
            "scikit-learn>=1.1",
        ],
        extras_require={
            "tests": ["pytest"],
            "examples": ["matplotlib"],
        },
    )
