from setuptools import setup, find_packages

setup(
    name="sajda",
    version="0.1.0",
    description="Sajda - prayer-time schedule engine and trigger daemon",
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "fastapi>=0.109.0",
        "uvicorn>=0.27.0",
        "apscheduler>=3.10.0,<4",
        "python-dotenv>=1.0.0",
        "pydantic>=2.0.0",
        "loguru>=0.7.0",
        "pyyaml>=6.0",
        "aiohttp>=3.9.0",
        "adhanpy>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "httpx>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "sajda=sajda.main:main",
        ],
    },
)
