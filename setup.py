from setuptools import setup, find_packages

setup(
    name="oura-cli",
    version="1.0.0",
    description="Command-line client for the Oura Ring cloud API",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        'aiohttp>=3.9.0',
        'pydantic>=2.0.0',
        'pydantic-settings>=2.0.0',
        'python-dotenv>=1.0.0',
        'typer>=0.9.0',
        'rich>=13.0.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0.0',
            'pytest-asyncio>=0.21.0',
            'pytest-mock>=3.10.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'oura=oura_cli.cli:main',
        ],
    },
)
