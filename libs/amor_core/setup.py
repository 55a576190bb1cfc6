from setuptools import setup, find_packages

setup(
    name="amor_core",
    version="0.1.0",
    description="Client-side roll, moderation queue and preferences for Amor",
    packages=find_packages(),
    install_requires=[
        "httpx>=0.27",
        "pydantic>=2.0",
    ],
    python_requires=">=3.9",
)
