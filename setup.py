"""
Setup configuration for IdlRpc
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="idlrpc",
    version="0.1.0",
    author="IdlRpc Team",
    description="IDL contract validation and dispatch for RPC services",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["idlrpc_core", "idlrpc_core.*", "idlrpc_cli", "idlrpc_cli.*"]),
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "idlrpc=idlrpc_cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
)
