# setup.py
from setuptools import setup, find_packages

setup(
    name="zenon-wallet-api",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.10",
    install_requires=[
        "fastapi>=0.115.0",
        "uvicorn>=0.15.0",
        "pydantic>=2.0",
        "cryptography>=3.4.8",
        "eth-account>=0.8.0",
        "bech32>=1.2.0",
        "websockets>=10.0",
        "aiofiles>=0.8.0",
        "pyyaml>=6.0",
        "prometheus-client>=0.14.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "pytest-cov>=4.1",
            "pytest-mock>=3.10",
            "httpx>=0.24",
            "black>=23.0",
            "isort>=5.12",
            "flake8>=6.0",
            "mypy>=1.0"
        ],
    },
    entry_points={
        "console_scripts": [
            "zenon-wallet-api=zenon_wallet_api.cli.cli:main",
        ],
    },
    author="Your Name",
    author_email="your.email@example.com",
    description="Wallet management API for Zenon Network of Momentum nodes",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    url="https://github.com/yourusername/zenon-wallet-api",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
