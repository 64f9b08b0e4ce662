from .base import PayloadDecoder
from .binary import BinaryMapDecoder
from .flat import FlatArrayDecoder
from .nested import NestedGazeDecoder
