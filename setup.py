# setup.py
from setuptools import setup, find_packages

setup(
    name="snapshot4ai",
    version="0.1.0",
    description="Directory snapshot and content-indexing engine for AI-assisted code viewing",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        "tiktoken",  # Token estimates for analysis requests
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'snapshot4ai=snapshot4ai.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
