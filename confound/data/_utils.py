import numpy as np
from typing import List


def index_over_chunks(chunks: List[int]):
    """
    iterate over chunks of a dask array

    Parameters
    ----------
    chunks: List[int]
        Number of rows or columns in each chunk

    Returns
    -------
    generator
        generator of chunk indices so one can access the chunk with
        mat[start : stop, :] (axis=0) or mat[:, start : stop] (axis=1)
    """
    indices = np.insert(np.cumsum(chunks), 0, 0)
    for i in range(len(indices) - 1):
        start, stop = indices[i], indices[i + 1]
        yield start, stop
