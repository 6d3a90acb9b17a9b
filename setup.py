"""
Setup script for the CN Admin Tree application.
"""

from setuptools import setup, find_packages

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

# Separate development requirements
dev_requirements = [req for req in requirements if any(dev in req for dev in ["pytest", "black", "flake8", "mypy", "sphinx"])]
install_requirements = [req for req in requirements if req not in dev_requirements]

setup(
    name="cn-admin-tree",
    version="1.0.0",
    author="Data Analytics Team",
    description="Builds the province/prefecture/county tree from China's administrative division codes",
    long_description="CN Admin Tree - turns the published list of 6-digit administrative division codes into a nested province, prefecture and county tree with full ancestry names and a flat id index.",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    install_requires=install_requirements,
    extras_require={
        "dev": dev_requirements,
    },
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "cn-admin-tree=main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
