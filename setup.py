#!/usr/bin/env python

from setuptools import setup

setup(
    name="bucketfs",
    version="0.1.0",
    description="Folders and files on top of S3-compatible object storage",
    packages=["bucketfs", "bucketfs.objectstorage"],
    include_package_data=True,
    zip_safe=False,
    python_requires=">=3.10",
    keywords=["S3", "filesystem", "object storage"],
    classifiers=[
        "License :: OSI Approved :: MIT License",
        "Topic :: System :: Filesystems",
    ],
    install_requires=[
        "aiobotocore",
        "types-aiobotocore-s3",
        "async-lru",
        "pydantic>=2",
        "pydantic-settings",
        "python-dotenv",
    ],
    extras_require={
        'dev': [
            'pytest',
            'anyio',
            'mypy',
            'flake8',
        ]
    },
    entry_points={
        'console_scripts': [
            'bucketfs = bucketfs.__main__:main'
        ]
    },
)
