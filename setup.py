from setuptools import setup, find_packages

setup(
    name="code-walkthrough",
    version="0.1.0",
    description="Index a source tree and trace a plausible execution path for a question",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "click>=8.0.0",
        "rich>=13.0.0",
        "networkx>=2.5",
        "pathspec>=0.12.0",
        "pyyaml>=6.0",
        "python-dotenv>=1.0.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "black>=22.0.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "code-walkthrough=code_walkthrough.cli:main",
        ],
    },
    python_requires=">=3.8",
)
