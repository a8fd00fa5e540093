from ._logging import logger, set_log_level
from .dataset import Dataset
from . import data, dataset, simulate, select, assoc, compare, plot, io, cli
from .version import __version__

__all__ = [
    "data",
    "dataset",
    "simulate",
    "select",
    "assoc",
    "compare",
    "plot",
    "io",
    "cli",
    "Dataset",
]
