from setuptools import setup, find_namespace_packages

setup(
    name="smacktrack-golf",
    version="0.1.0",
    description="GPS shot distance tracker with wind and temperature adjustment",
    author="SmackTrack",
    packages=find_namespace_packages(include=["src", "src.*"]),
    python_requires=">=3.11",
    install_requires=[
        "PyQt6>=6.6.0",
        "numpy>=1.26.0",
        "requests>=2.31.0",
    ],
    extras_require={
        "test": ["pytest>=7.4.0", "pytest-qt>=4.2.0"],
    },
    entry_points={
        "console_scripts": [
            "smacktrack=src.main:main",
        ],
    },
)
