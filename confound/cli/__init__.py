#!/usr/bin/env python

import fire
from ._geno import simulate_geno, import_pfile, subset
from ._repro import repro


def cli():
    """
    Entry point for the confound command line interface.
    """
    fire.Fire()


if __name__ == "__main__":
    fire.Fire()
