from setuptools import find_packages, setup

setup(
    name="painel-importer",
    version="0.1.0",
    packages=find_packages(exclude=["painel.tests"]),
    install_requires=[
        "sqlalchemy>=2.0",
        "pandas",
        "openpyxl",
        "click",
        "python-dotenv",
        "rapidfuzz",
        "pypdf"
    ],
    extras_require={"dev": ["pytest"]},
    entry_points={
        "console_scripts": [
            "painel=painel.cli.main:cli",
        ],
    },
)
