from setuptools import find_packages, setup

setup(
    name="firflow",
    version="0.1.0",
    description="FIR filter design, direct and parallel convolution, and block-wise streaming filtering.",
    packages=find_packages(include=["firflow", "firflow.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "pandas",
        "click",
        "tabulate",
        "pydantic>=2",
        "toml",
        "rich",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-mock",
            "scipy",
        ],
    },
    entry_points={
        "console_scripts": [
            "firflow=firflow.cli.main:cli",
        ],
    },
)
