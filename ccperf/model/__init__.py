from .info import CenterInfo, NamedInfo
from .shape import ColumnKind, RowKind, TypeGroupIndex

__all__ = ["CenterInfo", "NamedInfo", "RowKind", "ColumnKind", "TypeGroupIndex"]
