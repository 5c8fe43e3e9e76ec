"""Reading and writing mesh and parameter files."""

from .obj import read_obj_records, write_obj, write_parameters

__all__ = ['read_obj_records', 'write_obj', 'write_parameters']
