"""A setuptools setup module for py_to_jsonschema"""

# Standard
import os

# Third Party
from setuptools import setup

# Read the README to provide the long description
python_base = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(python_base, "README.md"), "r") as handle:
    long_description = handle.read()

# Read version from the env
version = os.environ.get("RELEASE_VERSION", "0.0.0")

# Read in the requirements
with open(os.path.join(python_base, "requirements.txt"), "r") as handle:
    requirements = handle.read()

setup(
    name="py_to_jsonschema",
    version=version,
    description="A library for converting type descriptors to JSON Schema",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    classifiers=[
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords=["json", "json schema", "jsonschema", "protobuf", "proto", "dataclass"],
    packages=["py_to_jsonschema"],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={"test": ["pytest"]},
)
