"""Build the lppdecode package."""

from setuptools import setup, find_packages

setup(
    name="lppdecode",
    version="0.1.0",
    description="Cayenne LPP / RAKwireless sensor payload decoder",
    package_dir={"": "python"},
    packages=find_packages("python"),
    python_requires=">=3.9",
    install_requires=["numpy"],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": ["lppdecode=lppdecode.cli:main"],
    },
)
