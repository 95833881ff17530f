"""
Dynamic loader for user reduce functions
Loads a user-provided Python file and returns its reduce function
"""

import os
import sys
import logging
import importlib.util

logger = logging.getLogger(__name__)

REDUCE_FUNCTION_NAMES = ('reduce_function', 'reduce_fn')


class FunctionLoader:
    """Dynamically loads a user-provided reduce function from a Python file"""

    def __init__(self, function_file: str):
        """
        Initialize the function loader

        Args:
            function_file: Path to user's Python file containing the reduce function
        """
        self.function_file = function_file
        self.module = None

    def load_module(self):
        """
        Dynamically load user-provided module

        Returns:
            The loaded module object

        Raises:
            FileNotFoundError: If the function file doesn't exist
        """
        if not os.path.exists(self.function_file):
            raise FileNotFoundError(f"Reduce function file not found: {self.function_file}")

        spec = importlib.util.spec_from_file_location("user_reduce", self.function_file)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot load reduce function file: {self.function_file}")
        module = importlib.util.module_from_spec(spec)
        sys.modules["user_reduce"] = module
        spec.loader.exec_module(module)
        self.module = module
        logger.debug(f"Loaded reduce module from {self.function_file}")
        return module

    def get_reduce_function(self):
        """
        Get reduce function from loaded module

        Returns:
            The `reduce_function` (or `reduce_fn`) callable from the module

        Raises:
            AttributeError: If module defines neither name
        """
        if not self.module:
            self.load_module()

        for name in REDUCE_FUNCTION_NAMES:
            func = getattr(self.module, name, None)
            if func is not None:
                if not callable(func):
                    raise AttributeError(f"'{name}' in {self.function_file} is not callable")
                return func
        raise AttributeError("Module must define 'reduce_function'")
