"""
Setup file.

Project metadata lives in pyproject.toml; this only ships the template data.
"""

from setuptools import setup


if __name__ == "__main__":
    setup(
        package_data={"tako.templates": ["*/*.template"]},
        include_package_data=True)
