"""setuptools setup for ConfTimer.

Install for development:
    pip install -e ".[tests]"
"""

from setuptools import setup, find_packages

setup(
    name="ConfTimer",
    version="0.1.0",
    packages=find_packages(include=["conftimer", "conftimer.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6",
        "SQLAlchemy>=2.0",
    ],
    extras_require={
        "tests": ["pytest"],
    },
    entry_points={
        "gui_scripts": ["conftimer = conftimer.__main__:main"],
    },
)
