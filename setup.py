#!/usr/bin/env python
"""Setup script for hivemall-spark."""

import sys
from pathlib import Path
from setuptools import setup, find_packages

if sys.version_info < (3, 8):
    sys.exit('Python 3.8 or higher is required.')

HERE = Path(__file__).parent
README = (HERE / "README.md").read_text(encoding='utf-8')


def get_version():
    version_file = HERE / "src" / "hivemall_spark" / "__version__.py"
    if version_file.exists():
        namespace = {}
        exec(version_file.read_text(encoding='utf-8'), namespace)
        return namespace['__version__']
    return "0.1.0"


VERSION = get_version()

INSTALL_REQUIRES = [
    # Host query engine
    "pyspark>=3.5.0",

    # Configuration
    "pyyaml>=6.0",
    "pydantic>=2.0.0",

    # CLI
    "click>=8.1.0",
]

TEST_REQUIRES = [
    "pytest>=7.0.0",
    "pytest-cov>=4.0.0",
]

DEV_REQUIRES = TEST_REQUIRES + [
    "black>=22.0.0",
    "isort>=5.0.0",
    "flake8>=5.0.0",
    "mypy>=1.0.0",
]

setup(
    name="hivemall-spark",
    version=VERSION,
    description="Hivemall machine-learning functions for Spark DataFrames",
    long_description=README,
    long_description_content_type="text/markdown",
    license="Apache License 2.0",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "Topic :: System :: Distributed Computing",
    ],
    keywords=["hivemall", "spark", "pyspark", "hive", "machine-learning", "udf"],
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=INSTALL_REQUIRES,
    extras_require={
        "test": TEST_REQUIRES,
        "dev": DEV_REQUIRES,
    },
    entry_points={
        "console_scripts": [
            "hivemall-spark=hivemall_spark.cli:main",
        ],
    },
    zip_safe=False,
)
