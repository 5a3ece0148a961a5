[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ticketbooking"
version = "0.1.0"
description = "HTTP service for event ticket booking with queued payment processing and booking expiry"
requires-python = ">=3.10"
keywords = ["tickets", "booking", "events", "flask", "redis", "sqlite", "rest", "api"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Office/Business :: Scheduling",
]
dependencies = [
    "flask>=2.2",
    "redis>=4.5",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
ticketbooking = "ticketbooking.app:main"

[tool.hatch.build.targets.wheel]
packages = ["ticketbooking"]

[tool.pytest.ini_options]
addopts = "-ra"
