from setuptools import setup,find_packages

def readme():
    with open('README.txt') as f:
        return f.read()

setup(name='radexsolver',
      version='0.1',
      description='python implementation of the RADEX non-LTE radiative transfer code',
      long_description=readme(),
      classifiers=['Development Status :: 3 - Alpha',
                   'License :: OSI Approved :: MIT License',
                   'Programming Language :: Python :: 3',
                   'Topic :: Scientific/Engineering :: Astronomy',
                   'Intended Audience :: Science/Research'],
      keywords=['RADEX','radiative transfer','non-LTE','escape probability'],
      license='MIT',
      packages=find_packages(exclude=['tests']),
      install_requires=['scipy','numpy','numba'],
      include_package_data=True,
      zip_safe=False,
      tests_require=['pytest'],
      extras_require={'test':['pytest']},
      python_requires='>=3.8')
