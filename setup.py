from pathlib import Path
from setuptools import setup, find_packages


def read_readme() -> str:
    readme_path = Path(__file__).resolve().parent / "README.md"
    return readme_path.read_text(encoding="utf-8") if readme_path.exists() else ""


setup(
    name="idmask",
    version="1.0.0",
    packages=find_packages(include=["idmask", "idmask.*"]),
    install_requires=[
        "cryptography>=41.0.0",
        "numpy>=1.24.0",
    ],
    python_requires=">=3.10",
    description="Short, reversible, non-sequential IDs for numbers, names and text",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
)
