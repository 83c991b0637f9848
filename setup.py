# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="autonavbar",
    version="0.1.0",
    description="Configuration-driven sidebar navigation resolver for Quarto projects",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["autonavbar", "autonavbar.*"]),
    python_requires=">=3.9",
    install_requires=[
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        'console_scripts': [
            'autonavbar=autonavbar.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
