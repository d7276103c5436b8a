#!/usr/bin/env python3

import setuptools

VERSION = "0.0.1"
DESCRIPTION = "Binary byte replacement patch tools"
LONG_DESCRIPTION = (
    "Create, inspect and apply .zt byte replacement patches for executables"
)

setuptools.setup(
    name="ztpatch",
    version=VERSION,
    author="Embeint Holdings Pty Ltd",
    author_email="support@embeint.com",
    description=DESCRIPTION,
    long_description=LONG_DESCRIPTION,
    packages=setuptools.find_packages(where="src"),
    package_dir={"": "src"},
    include_package_data=True,
    install_requires=[
        "argcomplete",
        "colorama",
        "pyyaml",
        "tabulate",
        "typing_extensions",
    ],
    extras_require={"test": ["pytest"]},
    python_requires=">=3.10",
    entry_points={"console_scripts": ("ztpatch = ztpatch.app.main:main",)},
    zip_safe=False,
)
