"""
Dialect definitions sub-package for fpga-pinout.

Contains YAML files describing each known vendor pin-file layout. The
loader module (dialect_registry.py in the parent package) reads these
files at runtime.
"""
