from setuptools import setup, find_packages

from pymeca.__version__ import __version__

with open("README.md", "r", encoding="utf-8") as f:
  long_description = f.read()


extras_dev = [
  "pytest",
  "pytest-timeout",
  "pylint",
  "mypy",
]

extras_all = extras_dev

setup(
  name="PyMeca",
  version=__version__,
  packages=find_packages(exclude=["examples", "examples.*"]),
  description="asyncio client for the Mecademic Meca500 robot arm TCP command protocol",
  long_description=long_description,
  long_description_content_type="text/markdown",
  install_requires=["typing_extensions"],
  python_requires=">=3.9",
  package_data={"pymeca": ["version.txt"]},
  extras_require={
    "dev": extras_dev,
    "all": extras_all,
  },
)
