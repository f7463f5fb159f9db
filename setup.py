import re

import setuptools

# Read version without importing the package (dependencies may not be installed yet)
with open("pyespcontrol/__init__.py", "r") as fh:
    __version__ = ".".join(re.search(r"version_tuple = \((\d+), (\d+), (\d+)\)", fh.read()).groups())

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="pyespcontrol",
    version=__version__,
    description="Python module to drive the HTTP control API of an ESP32 actuator / Modbus controller",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(),
    install_requires=[
        'requests',
        'urllib3',
        'pydantic>=2.0',
        'pydantic-settings>=2.0',
        'python-dotenv',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-asyncio',
        ],
    },
    entry_points={
        'console_scripts': [
            'pyespcontrol=pyespcontrol.__main__:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
