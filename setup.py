# setup.py
from setuptools import find_packages, setup

setup(
    name="incident-map",
    version="0.0.1",
    packages=find_packages(include=["incident_map", "incident_map.*"]),
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "fastapi",
        "pydantic>=2",
        "pydantic-settings",
        "sqlalchemy[asyncio]>=2.0",
        "asyncpg",
        "alembic",
        "psycopg[binary]",
        "structlog",
        "sentry-sdk",
        "slowapi",
        "limits",
        "python-dotenv",
        "uvicorn",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "httpx",
            "aiosqlite",
        ],
    },
)
