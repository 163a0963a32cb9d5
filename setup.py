from setuptools import setup, find_packages
from codecs import open
from os import path

here = path.abspath(path.dirname(__file__))
name = "jdkfetch"
exec(open("jdkfetch/version.py").read())


# Get the long description from the README file
with open(path.join(here, "README.rst"), encoding="utf-8") as f:
    long_description = f.read()

try:
    with open(path.join(here, "requirements.txt"), encoding="utf-8") as f:
        pinned_reqs = f.readlines()
except FileNotFoundError:
    pinned_reqs = []


setup(
    name=name,
    version=__version__,
    python_requires=">=3.8",
    description="Download and cache Eclipse Temurin JDKs",
    long_description=long_description,
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Build Tools",
        "Operating System :: MacOS :: MacOS X",
        "Operating System :: Microsoft :: Windows",
        "Operating System :: POSIX",
        "Programming Language :: Java",
        "Programming Language :: Python :: 3",
    ],
    keywords=[
        "adoptium",
        "java",
        "jdk",
        "temurin",
        "toolchain",
    ],
    packages=find_packages(exclude=["contrib", "docs", "tests", "tests.*"]),
    install_requires=pinned_reqs or [
        "click>=8.1",
        "colorama",
        "fasteners",
        "requests",
        "tqdm",
    ],
    dependency_links=[],
    extras_require={
        "test": ["coverage", "pytest"],
    },
    entry_points={
        "console_scripts": [
            "jdkfetch=jdkfetch.__main__:main",
        ],
    },
)
