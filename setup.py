#!/usr/bin/env python3
"""Setup script for BubbleMap."""

from setuptools import setup, find_packages

setup(
    name="bubblemap",
    version="1.0.0",
    description="Physics-settled bubble diagrams with drag and long-press editing",
    author="BubbleMap Project",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[],
    extras_require={
        # GTK desktop host, renderer and image export
        "gui": [
            "PyGObject>=3.46.0",
            "pycairo>=1.25.0",
        ],
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "bubblemap=bubblemap.launcher:main",
            "bubblemap-simulate=bubblemap.simulate:main",
        ],
        "gui_scripts": [
            "bubblemap-gui=bubblemap.launcher:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: X11 Applications :: GTK",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Topic :: Multimedia :: Graphics :: Editors",
    ],
)
