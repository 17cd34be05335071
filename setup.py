# setup.py
from setuptools import setup, find_packages

setup(
  name="vast_combine",
  version="2.5.1",
  packages=find_packages(where="src"),
  package_dir={"":"src"},
  python_requires=">=3.11",
  install_requires=["click>=8.0", "pydantic>=2.0"],
  extras_require={
    "test": ["pytest"],
  },
  entry_points={
    "console_scripts": [
      "vast-combine = vast_combine.cli:main"
    ]
  }
)
