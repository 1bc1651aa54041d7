import jax
import numpy as onp

__all__ = ["enable_x64", "x64_enabled"]


def enable_x64(enable:bool = True):
    """Switch jax to double precision. The estimators compare against tolerances
    well below single precision, so this is done on package import.

    The setting is global to the jax process, see the `jaxkef` package docstring."""
    jax.config.update("jax_enable_x64", enable)


def x64_enabled() -> bool:
    return jax.dtypes.canonicalize_dtype(onp.float64) == onp.float64
