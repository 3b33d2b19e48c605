"""
python -m build
twine upload dist/*
"""

from setuptools import setup, find_packages


def jaops_setup():
    with open("requirements.txt", "rt") as fp:
        install_requires = fp.read().strip().split("\n")

    version = "0.1.0"

    setup(
        name="jaops",
        packages=find_packages(include=["jaops", "jaops.*"]),
        version=version,
        license="GPLv3",
        description="jaops : JSON:API operation pipeline for asyncio",
        long_description=open("README.rst").read(),
        keywords=["JsonAPI", "asyncio", "FastAPI", "Flask", "SqlAlchemy", "REST"],
        python_requires=">=3.8, <4",
        install_requires=install_requires,
        classifiers=[
            "Development Status :: 3 - Alpha",
            "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
            "Intended Audience :: Developers",
            "Framework :: FastAPI",
            "Framework :: Flask",
            "Topic :: Software Development :: Libraries",
            "Environment :: Web Environment",
            "Programming Language :: Python :: 3.12",
            "Programming Language :: Python :: 3.11",
            "Programming Language :: Python :: 3.10",
            "Programming Language :: Python :: 3.9",
            "Programming Language :: Python :: 3.8",
        ],
        extras_require={"test": ["pytest>=7.0", "pytest-asyncio>=0.21", "httpx>=0.24"]},
    )


jaops_setup()  # pragma: no cover
