"""Setup script for NodeFlow."""

from setuptools import find_packages, setup

setup(
    name="nodeflow",
    version="0.1.0",
    description="Node-based data pipeline execution engine",
    author="NodeFlow Team",
    packages=find_packages(include=["nodeflow", "nodeflow.*"]),
    install_requires=[
        "pandas>=2.0.0",  # Record packaging and SQL writes
        "sqlalchemy>=2.0.0",  # SQL source/destination connectors
        "psycopg2-binary>=2.9.0",  # PostgreSQL driver
        "requests>=2.28.0",  # HTTP/REST connector
        "cryptography>=41.0.0",  # Connection credential encryption
        "pyyaml>=6.0",  # Workspace files
        "python-dotenv>=1.0.0",  # .env loading
        "typer>=0.9.0",  # CLI framework
        "rich>=13.0.0",  # CLI output
        "typing-extensions>=4.0.0",  # Type hints support
    ],
    package_data={
        "nodeflow": ["py.typed"],
    },
    extras_require={
        "mysql": [
            "pymysql>=1.1.0",  # MySQL driver
        ],
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.1.0",
            "black>=22.1.0",
            "isort>=5.10.1",
            "flake8>=4.0.1",
            "mypy>=1.0.0",  # Type checking
            "requests-mock>=1.11.0",
        ],
        "test": [
            "pytest>=7.0.0",
            "pytest-cov>=4.1.0",
            "mock>=5.0.0",  # For mocking in tests
            "requests-mock>=1.11.0",  # HTTP mocking for the REST connector
        ],
    },
    entry_points={
        "console_scripts": [
            "nodeflow=nodeflow.cli.main:cli",
        ],
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Database",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
