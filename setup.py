from setuptools import setup, find_packages

setup(
    name="mentorhub",
    version="0.1",
    packages=find_packages(exclude=["tests", "tests.*", "alembic"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy",
        "psycopg2-binary",
        "python-jose[cryptography]",
        "passlib[bcrypt]",
        "bcrypt<4.1",  # passlib 1.7 cannot read the version of newer bcrypt releases
        "python-multipart",
        "pydantic",
        "pydantic-settings",
        "python-dotenv",
        "alembic",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
