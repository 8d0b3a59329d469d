
from setuptools import setup, find_packages
setup(
    name="joypad_keymap",
    version="0.1.0",
    packages=find_packages(exclude=["tests"]),
    install_requires=["numpy", "zstandard"],
    extras_require={"test": ["pytest"]},
    python_requires=">=3.10",
)
