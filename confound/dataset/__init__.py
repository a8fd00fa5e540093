from ._dataset import Dataset
from ._utils import sample_indiv
from ._load import load_toy

__all__ = ["Dataset", "sample_indiv", "load_toy"]
