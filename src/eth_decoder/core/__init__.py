"""
Shared infrastructure: hex normalization, configuration, logging and input loading.
"""
