[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "netlabs"
version = "0.1.0"
description = "Small socket programs: a length-framed TCP message board, DNS resolvers, an echo service and a file upload server"
requires-python = ">=3.10"
dependencies = []
keywords = ["sockets", "tcp", "udp", "dns", "message-board", "file-transfer", "networking"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications",
    "Topic :: Internet :: Name Service (DNS)",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
netlabs-board-server = "netlabs.board_server:main"
netlabs-board-client = "netlabs.board_client:main"
netlabs-resolve = "netlabs.resolver:main"
netlabs-udp-resolver-server = "netlabs.udp_resolver:server_main"
netlabs-udp-resolver-client = "netlabs.udp_resolver:client_main"
netlabs-echo-server = "netlabs.echo:server_main"
netlabs-echo-client = "netlabs.echo:client_main"
netlabs-upload-server = "netlabs.file_transfer:server_main"
netlabs-upload-client = "netlabs.file_transfer:client_main"
netlabs-local-board = "netlabs.local_board:main"

[tool.hatch.build.targets.wheel]
packages = ["netlabs"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
