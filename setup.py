from setuptools import setup, find_packages

setup(
    name="k8s-rewrite",
    version="0.3.0",
    description="Render parameterized Kubernetes manifest trees and generate an apply script.",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2",
        "python-dotenv>=1.0",
        "PyYAML>=6",
        "rich>=13",
        "typer>=0.9",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": [
            "k8s-rewrite=k8s_rewrite.cli:main",
        ],
    },
)
