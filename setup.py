from setuptools import setup, find_packages

setup(
  name='zort',
  version=0.1,
  description='Pack benchmark jobs into cluster buckets and estimate latency and cost',
  packages=find_packages(exclude=['tests']),
  python_requires='>=3.11',
  install_requires=[
    'numpy', 'pandas', 'tqdm'
  ],
  extras_require={
    'test': ['pytest'],
  },
  entry_points={
    'console_scripts': ['zort=zort.cli:main'],
  },
)
