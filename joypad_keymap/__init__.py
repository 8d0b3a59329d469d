from .catalog import load_catalog, parse_catalog
from .compiler import (CompiledBucket, CompiledKeymap, KeymapCompiler,
                       TitleRecord, compile_catalog)
from .errors import KeymapError
from .mapping import Binding, MappingRecord

__all__ = [
    "Binding", "CompiledBucket", "CompiledKeymap", "KeymapCompiler",
    "KeymapError", "MappingRecord", "TitleRecord", "compile_catalog",
    "load_catalog", "parse_catalog",
]
