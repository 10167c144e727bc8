# stdlib
from datetime import datetime
from typing import List, Literal, Optional, Tuple, Union
from pathlib import Path

# Verbosity for classes, functions, methods, etc.
type Verbosity = Literal[0, 1, 2]
# Type alias for file/folder paths
type Address = Union[str, Path]
# Capacity is an arbitrary-scale integer (mWh, %, ...); None marks a
# timestamp with no backing observation
type Capacity = Optional[int]
# A single chart point and an ordered run of them
type Point = Tuple[datetime, int]
type Run = List[Point]
# Column-oriented form of a run handed to rendering layers
type Polyline = Tuple[List[datetime], List[int]]
# How predicted samples are treated relative to observed history
type PredictionMode = Literal["discard", "merge", "tail"]
