# setup.py
from setuptools import setup, find_packages

setup(
    name="faleproxy",
    version="0.1.0",
    description="Прокси FaleProxy: загружает страницу и заменяет Yale на Fale в видимом тексте",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.10",
        "click>=8.0",
        "pydantic>=2.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "faleproxy=fale_proxy.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
