# flake8: noqa
from setuptools import setup, find_packages
from pathlib import Path

long_description = (Path(__file__).parent / "README.md").read_text()

exec(open("confound/version.py").read())

setup(
    name="confound-kit",
    version=__version__,
    description="Reproduce spurious score-test associations of SNPs confounded with covariates",
    url="https://github.com/kangchenghou/confound-kit",
    author="Kangcheng Hou",
    author_email="kangchenghou@gmail.com",
    packages=find_packages(include=["confound", "confound.*"]),
    setup_requires=["numpy>=1.10"],
    python_requires=">=3.7",
    install_requires=[
        "numpy",
        "pandas",
        "scipy",
        "matplotlib",
        "dask[array]>=2021.11.2",
        "tqdm",
        "xarray",
        "zarr",
        "statsmodels",
        "structlog",
        "fire",
        "dask-pgen",
    ],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["confound=confound.cli:cli"]},
    classifiers=[
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Intended Audience :: Science/Research",
    ],
    long_description=long_description,
    long_description_content_type="text/markdown",
)
