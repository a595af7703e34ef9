"""Index generators."""

from artifacts.generators.defines import DefineIndexGenerator
from artifacts.generators.functions import FunctionIndexGenerator

__all__ = ["DefineIndexGenerator", "FunctionIndexGenerator"]
