#!/usr/bin/env python3
"""Setup script for Azure Quick Review"""
from setuptools import setup, find_packages

setup(
    name="azure-quick-review",
    version="1.0.0",
    description="Plugin-based best-practice compliance scanner for Azure resources",
    author="Azure Quick Review Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "azure-core>=1.26.0",
        "azure-identity>=1.12.0",
        "azure-mgmt-resource>=21.0.0,<26",
        "azure-mgmt-network>=22.0.0",
        "azure-mgmt-storage>=20.0.0",
        "azure-mgmt-monitor>=6.0.0",
        "azure-mgmt-subscription>=3.1.1",
        "azure-mgmt-keyvault>=10.0.0",
        "azure-mgmt-cosmosdb>=9.0.0",
        "azure-mgmt-containerregistry>=10.0.0",
        "azure-mgmt-containerservice>=20.0.0",
        "azure-mgmt-datafactory>=3.0.0",
        "azure-mgmt-eventhub>=10.1.0",
        "azure-mgmt-servicebus>=8.1.0",
        "azure-mgmt-redis>=14.0.0",
        "azure-mgmt-sql>=3.0.1",
        "azure-mgmt-rdbms>=10.1.0",
        "azure-mgmt-web>=7.0.0",
        "pyyaml>=6.0",
        "rich>=12.0.0",
        "typer>=0.7.0",
    ],
    extras_require={
        "tests": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "azqr=azure_quick_review.cli.main:main",
        ],
    },
    python_requires=">=3.8",
)
