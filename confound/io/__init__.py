from ._read import read_dataset, open_dataset, read_pfile
from ._write import write_dataset, write_assoc
