[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tapolight"
version = "0.1.0"
description = "Tapo smart bulb KLAP session cipher, handshake and command exchange, with ADC reading averaging for brightness and colour temperature"
requires-python = ">=3.10"
keywords = ["tapo", "klap", "smart-bulb", "home-automation", "lighting"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Home Automation",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["tapolight"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]
