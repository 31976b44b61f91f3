"""Public package interface for bellgen."""

from importlib.metadata import PackageNotFoundError, version

from .api.export import export_excel, table_to_dataframe
from .api.models import (
    GenerateResult,
    RowData,
    RunConfig,
    ShapeConfig,
    TableConfig,
    TableResult,
)
from .api.synthesizer import BellgenSynthesizer, generate
from .engine.generation import generate_table
from .runtime.rng import RNG
from .schema.config import load_config
from .schema.samples import available_sample_configs, get_sample_config

try:
    __version__ = version("bellgen")
except PackageNotFoundError:
    __version__ = "0.1.0"


__all__ = [
    "BellgenSynthesizer",
    "GenerateResult",
    "RNG",
    "RowData",
    "RunConfig",
    "ShapeConfig",
    "TableConfig",
    "TableResult",
    "available_sample_configs",
    "export_excel",
    "generate",
    "generate_table",
    "get_sample_config",
    "load_config",
    "table_to_dataframe",
]
