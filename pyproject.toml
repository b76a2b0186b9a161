[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "canarykit"
version = "0.1.0"
description = "Building blocks for synthetic health checks: folder statistics, DNS lookups, JUnit and JMeter results, metrics and Kubernetes helpers"
requires-python = ">=3.10"
keywords = ["monitoring", "health-check", "canary", "dns", "junit", "jmeter", "kubernetes"]
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
    "Topic :: System :: Monitoring",
    "Typing :: Typed",
]
dependencies = [
    "dnspython",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["canarykit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
