import os
import re
from codecs import open

from setuptools import find_packages
from setuptools import setup

# Based on https://github.com/pypa/sampleproject/blob/main/setup.py
# and https://python-packaging-user-guide.readthedocs.org/

here = os.path.abspath(os.path.dirname(__file__))

with open(os.path.join(here, "README.md"), encoding="utf-8") as f:
    long_description = f.read()
long_description_content_type = "text/markdown"

with open(os.path.join(here, "respkit/version.py")) as f:
    match = re.search(r'VERSION = "(.+?)"', f.read())
    assert match
    VERSION = match.group(1)

setup(
    name="respkit",
    version=VERSION,
    description="A read-only, thread-safe view of HTTP responses received as a sequence of body chunks.",
    long_description=long_description,
    long_description_content_type=long_description_content_type,
    license="MIT",
    classifiers=[
        "License :: OSI Approved :: MIT License",
        "Development Status :: 4 - Beta",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Internet :: WWW/HTTP",
        "Topic :: Software Development :: Libraries",
        "Typing :: Typed",
    ],
    packages=find_packages(
        include=[
            "respkit",
            "respkit.*",
        ]
    ),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[],
    extras_require={
        "dev": [
            "hypothesis>=5.8,<7",
            "pytest-cov>=2.7.1,<7",
            "pytest-timeout>=1.3.3,<3",
            "pytest>=6.1.0,<9",
            "tox>=3.5,<5",
        ],
    },
)
