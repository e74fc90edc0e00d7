from setuptools import setup, find_packages

setup(
    name="xcheck-pass",
    version="0.1.0",
    description="xcheck — cross-check instrumentation pass",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "hypothesis>=6.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "xcheck=xcheck.cli:main",
        ],
    },
)
