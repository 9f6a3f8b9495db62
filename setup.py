# setup.py
"""Setup script for the Media Optimizer."""

import os

from setuptools import setup, find_packages

setup(
    name="media-optim",
    version="1.0.0",
    description="Incremental media optimization that never re-processes already optimized files",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Media Tool Team",
    packages=find_packages(include=["media_optim", "media_optim.*"]),
    python_requires=">=3.9",
    install_requires=[
        "Pillow>=9.1.0",
        "tqdm>=4.50.0",
    ],
    extras_require={
        "test": [
            "pytest>=6.0.0",
            "pytest-cov>=2.10.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "media-optim=media_optim.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Multimedia :: Graphics",
        "Topic :: System :: Archiving :: Compression",
    ],
)
