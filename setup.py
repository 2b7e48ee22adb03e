from setuptools import setup, find_packages

setup(
    name="windows-program",
    version="1.0.0",
    description="Lists programs installed on Windows from the registry Uninstall entries",
    author="Your Name",
    packages=find_packages(include=["core", "cli", "utils"]),
    py_modules=["main"],
    install_requires=[
        "click>=8.1.0",
        "python-dateutil>=2.8.0",
        "tabulate>=0.9.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "winprogram=cli.commands:cli",
        ],
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "Operating System :: Microsoft :: Windows :: Windows 10",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
