from setuptools import find_namespace_packages, setup

setup(
    name="deckshare-backend",
    version="0.1.0",
    package_dir={"": "backend"},
    packages=find_namespace_packages(where="backend", include=["models*", "services*", "shared*"]),
    py_modules=["app", "database"],
    python_requires=">=3.10",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn[standard]>=0.27",
        "sqlalchemy[asyncio]>=2.0",
        "asyncpg>=0.29",
        "aiosqlite>=0.19",
        "pydantic[email]>=2.5",
        "bcrypt>=4.0",
        "python-jose[cryptography]>=3.3",
        "python-multipart>=0.0.9",
        "python-dotenv>=1.0",
        "PyYAML>=6.0",
        "Pillow>=10.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "httpx>=0.27",
        ],
    },
    include_package_data=True,
    description="Backend package for DeckShare (presentation sharing and access control)",
    author="Andreas Malathouras",
    author_email="steelstridertgm@gmail.com",
)
