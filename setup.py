"""Setup configuration for reviewaudit"""

from setuptools import setup, find_packages

setup(
    name="unreviewed-merge-audit",
    version="0.1.0",
    description=(
        "CLI check that fails when a GitHub repository has pull requests "
        "merged longer ago than a threshold without any review."
    ),
    author="Unreviewed Merge Audit Contributors",
    author_email="",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests>=2.28.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "unreviewed-merge-audit=reviewaudit.main:main",
        ],
    },
)
