"""
Handlers for the functions the voice agent can call.

Key components:
- function_registry: FunctionRegistry mapping names to async handlers and
  descriptors, and FunctionNotImplementedError for unknown names.
- local_functions: The built-in functions (add_item) and build_registry().
"""
