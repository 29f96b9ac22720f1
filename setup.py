"""Portable ASCII (odc) CPIO archive reader"""
import re
from pathlib import Path

from setuptools import find_packages, setup

HERE = Path(__file__).resolve(strict=True).parent


def read(*parts):
    return HERE.joinpath(*parts).open("r", encoding="utf-8").read()


# https://packaging.python.org/guides/single-sourcing-package-version/
def find_version(*file_paths):
    version_file = read(*file_paths)
    version_match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]", version_file, re.M)
    if version_match:
        return version_match.group(1)
    raise RuntimeError("Unable to find version string.")


setup(
    name="odcpio",
    description=__doc__,
    long_description=read("README.rst"),
    version=find_version("src", "odcpio", "__init__.py"),
    packages=find_packages("src"),
    package_dir={"": "src"},
    include_package_data=True,
    zip_safe=True,
    python_requires=">=3.8",
    install_requires=["pydantic>=2", "typing_extensions>=4"],
    extras_require={"test": ["pytest>=7"]},
    entry_points={
        "console_scripts": [
            "odcpio=odcpio.convert.cli:main",
            "odcpio-description=odcpio.convert.cli:main_description",
            "odcpio-list=odcpio.convert.cli:main_list",
        ]
    },
    classifiers=(
        "Development Status :: 2 - Pre-Alpha",
        "Intended Audience :: Developers",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.8",
        "Topic :: System :: Archiving",
    ),
)
