"""
OrderGuard Engine — configuration, context, registry, logging and the trigger
runtime.
"""
