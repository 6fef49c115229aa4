"""
Setup script for the Ansible Lightspeed client.
"""
from setuptools import setup, find_packages

setup(
    name="lightspeed-client",
    version="0.1.0",
    description="Client for the Ansible Lightspeed completion and explanation service",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "httpx>=0.24.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "python-dotenv>=1.0.0",
        "markdown>=3.4",
        "pygls>=1.1.0",
        "rich>=10.0.0",
        "typer>=0.9.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "lightspeed=lightspeed.cli.interface:app",
        ],
    },
)
