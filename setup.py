"""Setup configuration for the jigsaw-game package."""

from setuptools import find_packages, setup

setup(
    name="jigsaw-game",
    version="0.1.0",
    packages=find_packages(include=["jigsaw_game", "jigsaw_game.*", "jigsaw_shapes", "jigsaw_shapes.*"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "python-multipart",
        "numpy",
        "pillow",
        "pydantic",
        "pydantic-settings",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
            "httpx",
            "black",
            "flake8",
            "mypy",
            "isort",
        ],
    },
)
