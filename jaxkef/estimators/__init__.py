from .base import EstimatorBase
from .nystrom import Nystrom
from .wrapped import KernelExpFamilyNystrom
