from setuptools import setup, find_packages

setup(
    name="medpal",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "fastapi",
        "uvicorn",
        "python-jose[cryptography]",
        "passlib[bcrypt]",
        # passlib 1.7.4 cannot initialise against bcrypt 5
        "bcrypt<5",
        "pydantic[email]",
        "pydantic-settings",
        "prometheus-client",
        "twilio",
        "tzdata",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "httpx",
        ],
    },
)
