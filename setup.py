"""
Installation setup for dexloader
"""
import configparser
import pathlib

import setuptools

# Establish project directory
project_root: pathlib.Path = pathlib.Path(__file__).resolve().parent

# Read config details to determine version-ing
config_file = project_root.joinpath("dexloader/resources/dexloader.properties")
config = configparser.ConfigParser()
if config_file.is_file():
    config.read(str(config_file))

setuptools.setup(
    name="dexloader",
    version=config.get("DEXLOADER", "version", fallback="1.0.0+fallback"),
    description="Progressive species name acquisition and local caching",
    long_description=project_root.joinpath("README.md").open(encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    license="MIT",
    python_requires=">=3.9",
    classifiers=[
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: MacOS :: MacOS X",
        "Operating System :: Microsoft :: Windows :: Windows 10",
        "Operating System :: Unix",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python",
        "Topic :: Database",
    ],
    keywords=[
        "Cache",
        "JSON",
        "Pokedex",
        "PokeAPI",
    ],
    include_package_data=True,
    package_data={"dexloader": ["resources/*.properties"]},
    packages=setuptools.find_packages(include=["dexloader", "dexloader.*"]),
    install_requires=project_root.joinpath("requirements.txt")
    .open(encoding="utf-8")
    .readlines()
    if project_root.joinpath("requirements.txt").is_file()
    else [],  # Use the requirements file, if able
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ]
    },
    entry_points={"console_scripts": ["dexloader=dexloader.__main__:main"]},
)
