"""Nystrom kernel exponential family density estimation.

Importing `jaxkef` switches jax to double precision for the whole process
(`jax_enable_x64`), since the estimators and the autodiff kernels are only
accurate in float64. This changes the default dtype of every jax array
created afterwards, including in code unrelated to `jaxkef`. Call
`jaxkef.core.config.enable_x64(False)` to switch back once no estimator is
in use.
"""

from .core.config import enable_x64

enable_x64()

from .kern import DerivKernel, GaussianKernel, AutodiffKernel, AutodiffGaussianKernel, AutodiffLinearKernel
from .estimators import EstimatorBase, Nystrom, KernelExpFamilyNystrom
from .utilities.linalg import pinv_self_adjoint
from .utilities.parallel import get_global_parallel
