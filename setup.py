from setuptools import setup, find_packages

setup(
    name="serpent",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        "flask",  # For the Battlesnake HTTP transport
        "tqdm",  # For benchmark progress bars
        "sympy",  # For prime game seeds in the benchmark
    ],
    extras_require={
        "dev": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "serpent=serpent.__main__:main",
            "serpent-arena=serpent.arena:main",
        ],
    },
    description="A Battlesnake decision engine with bounded adversarial lookahead",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
