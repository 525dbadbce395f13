"""Setup script for the calendarpicker package."""

import os
from pathlib import Path

from setuptools import find_packages, setup
from setuptools.command.develop import develop
from setuptools.command.install import install


def post_install_setup():
    """Create the user configuration directory and point at the example config."""
    try:
        config_dir = Path.home() / ".config" / "calendarpicker"
        config_dir.mkdir(parents=True, exist_ok=True)
        if hasattr(os, "chmod"):
            os.chmod(config_dir, 0o755)

        config_file = config_dir / "config.yaml"
        if not config_file.exists():
            print("\n" + "=" * 60)
            print("calendarpicker installation complete")
            print("=" * 60)
            print(f"Configuration directory: {config_dir}")
            print("Copy config/config.yaml.example there as config.yaml to customize")
            print("Run 'calendarpicker --help' to see all available options")
            print("=" * 60)

    except OSError as e:
        print(f"Warning: Post-install setup failed: {e}")
        print("You may need to create the configuration directory manually.")


class PostInstallCommand(install):
    """Custom install command with post-install setup."""

    def run(self):
        install.run(self)
        post_install_setup()


class PostDevelopCommand(develop):
    """Custom develop command with post-install setup."""

    def run(self):
        develop.run(self)
        post_install_setup()


readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

# Read requirements, separating the test tooling into the dev extra
requirements_file = Path(__file__).parent / "requirements.txt"
requirements = []
dev_requirements = []

if requirements_file.exists():
    for line in requirements_file.read_text().strip().split("\n"):
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "pytest" in line:
            dev_requirements.append(line)
        else:
            requirements.append(line)

setup(
    name="calendarpicker",
    version="1.0.0",
    description="Date picking state machines (panel modes, keyboard, focus) over a pluggable date engine",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="CalendarPicker Team",
    packages=find_packages(exclude=["tests*", "docs*"]),
    include_package_data=True,
    install_requires=requirements,
    extras_require={
        "dev": dev_requirements
        + [
            "black>=23.0.0",
            "isort>=5.12.0",
            "mypy>=1.0.0",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Operating System :: MacOS",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: User Interfaces",
        "Framework :: AsyncIO",
    ],
    keywords="date picker calendar keyboard state-machine terminal async",
    entry_points={
        "console_scripts": [
            "calendarpicker=calendarpicker.__main__:main",
        ],
    },
    data_files=[
        ("share/calendarpicker/config", ["config/config.yaml.example"]),
    ],
    cmdclass={
        "install": PostInstallCommand,
        "develop": PostDevelopCommand,
    },
    zip_safe=False,
    platforms=["linux", "macos"],
)
