from setuptools import setup, find_packages

setup(
  name = 'jaxkef',
  packages = find_packages(exclude=["*.tests", "*.tests.*", "tests.*", "tests"]),
  version = '0.1.0',
  license='MIT',
  description = 'Nystrom approximated kernel exponential family density estimation, with kernel derivatives in closed form or by JAX automatic differentiation.',
  keywords = ['Jax', 'RKHS', 'kernel', 'exponential family', 'score matching', 'Nystrom'],
  install_requires=['jax', 'numpy', 'scikit-learn', 'joblib', 'matplotlib'],
  extras_require={'test': ['pytest', 'scipy']},
  classifiers=[
    'Development Status :: 3 - Alpha',
    'Intended Audience :: Developers',
    'License :: OSI Approved :: MIT License',
    'Programming Language :: Python :: 3',
  ],
)
