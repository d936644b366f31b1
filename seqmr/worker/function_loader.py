"""
Dynamic Function Loader for job files
Loads user-provided Python modules containing map and reduce functions
"""

import importlib.util
import logging
import os
import sys

from seqmr.common.errors import JobFileError
from seqmr.worker.adapters import FunctionMapper, FunctionReducer

logger = logging.getLogger(__name__)

MAP_FUNCTION_NAMES = ('map_function', 'map_fn')
REDUCE_FUNCTION_NAMES = ('reduce_function', 'reduce_fn')


class FunctionLoader:
    """Dynamically loads user-provided map/reduce functions from Python files"""

    def __init__(self, job_file: str):
        """
        Initialize the function loader

        Args:
            job_file: Path to user's Python file containing map/reduce functions
        """
        self.job_file = job_file
        self.module = None

    def load_module(self):
        """
        Dynamically load user-provided module. The module is imported once
        per loader and cached.

        Returns:
            The loaded module object

        Raises:
            FileNotFoundError: If the job file doesn't exist
            JobFileError: If the file cannot be imported
        """
        if self.module is not None:
            return self.module

        if not os.path.exists(self.job_file):
            raise FileNotFoundError(f"Job file not found: {self.job_file}")

        module_name = f"seqmr_job_{os.path.splitext(os.path.basename(self.job_file))[0]}"
        spec = importlib.util.spec_from_file_location(module_name, self.job_file)
        if spec is None or spec.loader is None:
            raise JobFileError(f"Failed to load job file: {self.job_file}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            sys.modules.pop(module_name, None)
            raise JobFileError(f"Error importing job file {self.job_file}: {e}") from e

        logger.debug(f"Loaded job file {self.job_file} as {module_name}")
        self.module = module
        return module

    def _get_function(self, names):
        if not self.module:
            self.load_module()

        for name in names:
            if hasattr(self.module, name):
                return getattr(self.module, name)
        raise JobFileError(f"Job file must define '{names[0]}'")

    def get_map_function(self):
        """
        Get map function from loaded module

        Returns:
            The map_function (or map_fn) callable from the module

        Raises:
            JobFileError: If module defines neither name
        """
        return self._get_function(MAP_FUNCTION_NAMES)

    def get_reduce_function(self):
        """
        Get reduce function from loaded module

        Returns:
            The reduce_function (or reduce_fn) callable from the module

        Raises:
            JobFileError: If module defines neither name
        """
        return self._get_function(REDUCE_FUNCTION_NAMES)

    def build_mapper(self) -> FunctionMapper:
        return FunctionMapper(self.get_map_function())

    def build_reducer(self) -> FunctionReducer:
        return FunctionReducer(self.get_reduce_function())
