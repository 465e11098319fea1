"""
Setup script for stepwise package
"""

from setuptools import find_packages, setup


with open("requirements.txt") as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]

setup(
    name="stepwise",
    version="0.1.0",
    description="Type-keyed step executor with constructor dependency resolution",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "stepwise=stepwise.cli:app",
        ],
    },
    include_package_data=True,
    package_data={
        "stepwise": ["schema/*.json"],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
