[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mysqld_metrics"
version = "0.1.0"
description = "Collect MySQL server statistics as Prometheus-style metrics from information_schema, performance_schema and mysql.user."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "mysql",
    "mariadb",
    "prometheus",
    "metrics",
    "monitoring",
    "performance_schema",
    "information_schema",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mysqld_metrics"]

[tool.hatch.build.targets.sdist]
include = ["mysqld_metrics", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
