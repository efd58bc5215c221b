from setuptools import setup, find_packages

setup(
    name="PredPreyShelter",
    version="0.1",
    packages=find_packages(include=["predpreyshelter", "predpreyshelter.*"]),
    description="Predator-prey gridworld simulation with rabbits, foxes, two vegetation tiers and shelters.",
    install_requires=[
        "numpy",
        "pygame",
        "matplotlib",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "predpreyshelter=predpreyshelter.main:main",
        ],
    },
)
