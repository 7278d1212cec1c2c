# setup.py
from setuptools import setup, find_packages

setup(
    name="subset_optimizer",
    version="0.1.0",
    description="Per-row bounded subset-sum optimization via meet-in-the-middle search",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "sympy",
        "matplotlib",
        "numpy",
    ],
    extras_require={
        "test": [
            "pytest",
            "hypothesis",
        ],
    },
    entry_points={
        "console_scripts": [
            "subset-optimizer = subset_optimizer.cli:main",
        ],
    },
)
