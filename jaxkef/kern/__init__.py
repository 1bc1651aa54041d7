from .base import Kernel, DerivKernel
from .rbf import GaussianKernel
from .autodiff import AutodiffKernel, AutodiffGaussianKernel, AutodiffLinearKernel
