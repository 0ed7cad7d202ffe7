"""Setup configuration for notifyq."""

from setuptools import setup, find_packages

setup(
    name="notifyq",
    version="1.0.0",
    description="In-process background notification job queue",
    author="Your Name",
    packages=find_packages(include=["notifyq", "notifyq.*"]),
    install_requires=[
        "click>=8.1.7",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
    ],
    extras_require={
        "test": ["pytest>=7.4"],
    },
    entry_points={
        "console_scripts": [
            "notifyq=notifyq.cli:cli",
        ],
    },
    python_requires=">=3.8",
)
