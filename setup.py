# new version to pypi (pip install twine):
# rm -rf dist && python setup.py sdist && python -m twine upload dist/*
import os
import setuptools

readme = os.path.join(os.path.dirname(__file__), "README.md")
with open(readme, "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="restsession",
    description="stateful REST API client for automated tests",
    long_description=long_description,
    long_description_content_type="text/markdown",
    version="1.0",
    packages=["restsession"],
    license="The MIT License",
    install_requires=[
        "configargparse",
        "keyring",
        "pandas>=1.0",
        "requests",
        "xmltodict",
    ],
    extras_require={
        "test": [
            "pytest",
            "requests-mock",
        ],
    },
    python_requires=">=3.7",
    entry_points=dict(
        console_scripts=[
            "restsession = restsession.cli:main",
        ],
    ),
)
