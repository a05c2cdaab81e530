"""ORBITFIT Package setup file."""
# Third Party Imports
import setuptools

setuptools.setup(
    name="orbitfit",
    description="Batch least-squares orbit determination from range, position & angle measurements",
    version="1.0.0",
    python_requires=">=3.10",
    packages=setuptools.find_packages("src"),
    package_dir={"": "src"},
    package_data={
        "": [
            "common/default_behavior.config",
        ],
        "orbitfit.physics": [
            "data/geopotential/*",
            "data/nutation/*",
        ],
    },
    install_requires=[
        "numpy>=1.19",
        "scipy>=1.6",
        "pydantic>=2.0",
        "sgp4>=2.20",
        "typing_extensions>=4.1.1",
    ],
    extras_require={
        "dev": [
            # Linting
            "ruff==0.1.1",
            "pylint==3.0.0",
            # Type Checking
            "mypy==1.6.0",
            # Formatters
            "black==23.9.1",
            "isort[colors]==5.12.0",
            "mdformat==0.7.17",
            "mdformat-myst==0.1.5",
            "mdformat-gfm==0.3.5",
            # Pre-commit stuff
            "pre-commit==3.5.0",
            # Misc.
            "check-manifest==0.49",
        ],
        "test": [
            "pytest>=7.4.2",
            "pytest-randomly>=3.15.0",
            "coverage[toml]>=7.3.2",
            "pytest-cov>=4.1.0",
        ],
    },
    zip_safe=False,
)
