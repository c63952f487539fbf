# setup.py
from setuptools import setup, find_packages

setup(
    name="perfect_hasher",
    version="0.1.0",
    description="Content-addressed fixed-width identifier allocation with directional probing",
    packages=find_packages(include=("perfect_hasher", "perfect_hasher.*")),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
