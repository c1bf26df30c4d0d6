"""Variant grids, typed value resources and mixin scripts."""

__version__ = "0.1.0"
__all__ = ["variant_map", "variant_resource", "mixin_script"]