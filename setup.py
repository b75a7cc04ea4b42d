from setuptools import setup, find_packages
import pathlib

# Detect layout
use_src = pathlib.Path("src/recordtools").exists()
pkg_args = {"package_dir": {"": "src"}, "packages": find_packages(where="src")} if use_src \
           else {"packages": find_packages(where=".")}

setup(
    name="record-tools",
    version="0.1.0",
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "typer",
        "PyYAML",
        "pydantic>=2",
        "jsonschema",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["record-tools=recordtools.cli:main"],
    },
    **pkg_args
)
