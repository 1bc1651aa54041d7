from typing import Any, Tuple, Union

import numpy as onp

__all__ = ["Array", "Shape", "Dtype", "IndexPair", "RandomStateT"]


Shape = Tuple[int]
Dtype = Any
Array = Any

# (point index, dimension index) pair decoded from a flattened coordinate
IndexPair = Tuple[int, int]

RandomStateT = Union[None, int, onp.random.RandomState]
